from datetime import datetime

from flask import current_app, has_app_context

DEFAULT_LOG_FILE = "logs.txt"


def log_event(message) -> None:
	path = current_app.config.get("LOG_FILE", DEFAULT_LOG_FILE) if has_app_context() else DEFAULT_LOG_FILE
	current_date_time = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
	with open(path, "a", encoding="utf-8") as file:
		file.write("TIME: " + current_date_time + " MESSAGE:" + message + "\n")
