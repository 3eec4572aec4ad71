"""
Run logger for search experiments.

Provides a Logger class that writes timestamped lines to a per-run log file
and, optionally, the console. It is callable, so it can be handed directly to
any engine as its `logger`.

Log files go to <log_dir>/<name>_<YYYYmmdd_HHMMSS>.log; without an explicit
log_dir they land under ./logs/YYYY/MM/DD/.
"""

import logging
import os
from datetime import datetime
from typing import Optional


class Logger:
	"""
	Logger that writes to both file and console with timestamps.

	Usage:
		logger = Logger("tsp_ga", log_dir="runs")
		logger("Starting search...")
		logger.header("Results")

		engine = GeneticAlgorithmEngine(adapter, verbose=True, logger=logger)

	Attributes:
		name: Logger name (used for log filename)
		log_file: Path to the log file
	"""

	def __init__(
		self,
		name: str = "search",
		log_dir: Optional[str] = None,
		console: bool = True,
		timestamp_format: str = '%H:%M:%S',
	):
		"""
		Args:
			name: Base name for the log file (e.g., "tsp_ga")
			log_dir: Log directory (default: ./logs/YYYY/MM/DD/)
			console: Whether to also log to console
			timestamp_format: strftime format for log timestamps
		"""
		self.name = name
		self._console = console

		now = datetime.now()
		if log_dir is None:
			log_dir = os.path.join("logs", now.strftime("%Y"), now.strftime("%m"), now.strftime("%d"))
		os.makedirs(log_dir, exist_ok=True)

		timestamp = now.strftime("%Y%m%d_%H%M%S")
		self.log_file = os.path.join(log_dir, f"{name}_{timestamp}.log")

		self._logger = logging.getLogger(f'metaheuristics.{name}.{timestamp}')
		self._logger.setLevel(logging.INFO)
		self._logger.propagate = False
		self._logger.handlers.clear()

		formatter = logging.Formatter('%(asctime)s | %(message)s', datefmt=timestamp_format)

		file_handler = logging.FileHandler(self.log_file)
		file_handler.setLevel(logging.INFO)
		file_handler.setFormatter(formatter)
		self._logger.addHandler(file_handler)

		if console:
			console_handler = logging.StreamHandler()
			console_handler.setLevel(logging.INFO)
			console_handler.setFormatter(formatter)
			self._logger.addHandler(console_handler)

	def __call__(self, message: str = "", flush: bool = True) -> None:
		self.log(message, flush=flush)

	def log(self, message: str = "", flush: bool = True) -> None:
		"""Log a message to file and console."""
		self._logger.info(message)
		if flush:
			for handler in self._logger.handlers:
				handler.flush()

	def separator(self, char: str = "=", width: int = 70) -> None:
		self.log(char * width)

	def header(self, title: str, char: str = "=", width: int = 70) -> None:
		self.log()
		self.separator(char, width)
		self.log(f"  {title}")
		self.separator(char, width)

	def close(self) -> None:
		"""Flush and detach all handlers (closes the log file)."""
		for handler in list(self._logger.handlers):
			handler.flush()
			handler.close()
			self._logger.removeHandler(handler)

	def __repr__(self) -> str:
		return f"Logger(name='{self.name}', log_file='{self.log_file}')"


def create_logger(
	name: str = "search",
	log_dir: Optional[str] = None,
	console: bool = True,
) -> Logger:
	"""Factory function to create a Logger instance."""
	return Logger(name=name, log_dir=log_dir, console=console)
