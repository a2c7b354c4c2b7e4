"""
GSC Capital Group 官网后台
"""
from pathlib import Path

from dotenv import load_dotenv

# backend/.env 需在读取环境变量的模块之前加载
ENV_PATH = Path(__file__).resolve().parents[1] / ".env"
if ENV_PATH.exists():
    load_dotenv(dotenv_path=str(ENV_PATH))
