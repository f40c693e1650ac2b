# /run.py

import subprocess
import threading
import time
import os
import sys

from price_compare.config import HOST, PORT, FRONTEND_PORT

BASE_DIR = os.path.dirname(os.path.abspath(__file__))


def run_fastapi():
  subprocess.run([sys.executable, "-m", "uvicorn", "price_compare.main:app", "--host", HOST, "--port", str(PORT), "--reload"], cwd=BASE_DIR)

def run_streamlit():
  time.sleep(2)
  env = dict(os.environ, PYTHONPATH=BASE_DIR, API_URL=os.getenv("API_URL", f"http://localhost:{PORT}"))
  subprocess.run([sys.executable, "-m", "streamlit", "run", "price_compare/frontend.py", "--server.port", str(FRONTEND_PORT), "--server.address", HOST], cwd=BASE_DIR, env=env)

if __name__ == "__main__":

  t1 = threading.Thread(target=run_fastapi)
  t2 = threading.Thread(target=run_streamlit)

  t1.start()
  t2.start()

  t1.join()
  t2.join()
