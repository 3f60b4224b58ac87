import sqlite3
import os

db_path = "bonos.db"

def check_db():
    if not os.path.exists(db_path):
        print(f"Error: {db_path} not found")
        return

    conn = sqlite3.connect(db_path)
    cursor = conn.cursor()

    print("bonus_records columns:")
    cursor.execute("PRAGMA table_info(bonus_records)")
    cols = cursor.fetchall()
    if not cols:
        print(" - table missing; start the app once to create it")
        conn.close()
        return
    for col in cols:
        print(f"   * {col[1]} ({col[2]})")

    cursor.execute("SELECT COUNT(*), COUNT(DISTINCT agent_id), COALESCE(SUM(total_bono), 0) FROM bonus_records")
    count, agents, total = cursor.fetchone()
    print(f"\nRows: {count}  Agents: {agents}  Total bono: {total:,.2f}")

    conn.close()

if __name__ == "__main__":
    check_db()
