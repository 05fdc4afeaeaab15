import os, time
from urllib.parse import urlparse

import pymysql

DATABASE_URL = os.getenv("DATABASE_URL")
if not DATABASE_URL:
    raise SystemExit("DATABASE_URL is not set")

# SQLAlchemy URL may start with mysql+pymysql://
url = DATABASE_URL.replace("mysql+pymysql://", "mysql://")
p = urlparse(url)

host = p.hostname or "localhost"
port = p.port or 3306
user = p.username or "root"
password = p.password or ""
dbname = (p.path or "/resort").lstrip("/") or "resort"

timeout_s = int(os.getenv("DB_WAIT_TIMEOUT", "60"))
start = time.time()
last_err = None

print(f"[wait_for_db] Waiting for MySQL at {host}:{port} db={dbname} user={user} (timeout={timeout_s}s)")
while True:
    try:
        conn = pymysql.connect(host=host, port=port, user=user, password=password, database=dbname)
        conn.close()
        print("[wait_for_db] MySQL is ready.")
        break
    except pymysql.MySQLError as e:
        last_err = e
        if time.time() - start > timeout_s:
            print(f"[wait_for_db] Timed out waiting for DB. Last error: {last_err}")
            raise
        time.sleep(1)
