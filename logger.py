# Veridca Registry Logger Module
# Licensed under the Apache License, Version 2.0

import logging
import json
import os
from datetime import datetime, timezone
from pathlib import Path


def log_dir() -> Path:
    """Log directory, created on first use"""
    path = Path(os.getenv("VERIDCA_LOG_DIR", "logs"))
    path.mkdir(parents=True, exist_ok=True)
    return path


class JSONFormatter(logging.Formatter):
    """JSON format for structured logs"""
    def format(self, record):
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False)


def setup_logger(name):
    """Create a fully configured logger"""
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)
    # Each named logger writes through its own handlers only
    logger.propagate = False

    # Prevent duplicate handlers
    if logger.handlers:
        return logger

    directory = log_dir()

    # ==== MAIN LOG (everything) ====
    main_handler = logging.FileHandler(directory / "veridca.log", encoding='utf-8')
    main_handler.setLevel(logging.DEBUG)
    main_handler.setFormatter(logging.Formatter(
        '[%(asctime)s] [%(levelname)-8s] [%(name)s:%(funcName)s:%(lineno)d] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))

    # ==== JSON LOG (structured) ====
    json_handler = logging.FileHandler(directory / "veridca.json", encoding='utf-8')
    json_handler.setLevel(logging.DEBUG)
    json_handler.setFormatter(JSONFormatter())

    # ==== ERROR LOG (errors only) ====
    error_handler = logging.FileHandler(directory / "errors.log", encoding='utf-8')
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(logging.Formatter(
        '[%(asctime)s] [ERROR] [%(name)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))

    # ==== CONSOLE ====
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter(
        '[%(asctime)s] [%(levelname)-8s] %(message)s',
        datefmt='%H:%M:%S'
    ))

    logger.addHandler(main_handler)
    logger.addHandler(json_handler)
    logger.addHandler(error_handler)
    logger.addHandler(console_handler)

    return logger


# ===== STANDARD LOGGER =====
logger = setup_logger("Veridca")

# ===== SPECIAL LOGGERS =====
blockchain_logger = setup_logger("Veridca.Web3")   # Web3/contract calls
deploy_logger = setup_logger("Veridca.Deploy")     # Deployments
tasks_logger = setup_logger("Veridca.Tasks")       # CLI tasks


def log_activity(level, category, message, **extra_data):
    """
    Log an activity with a category

    Example:
        log_activity("INFO", "MINT", "Token minted", token_id=1, to="0x...")
    """
    full_message = f"[{category}] {message}"
    if extra_data:
        full_message += " | " + " | ".join(f"{k}={v}" for k, v in extra_data.items())

    logger.log(logging.getLevelName(level.upper()), full_message)
