"""Run the conversion API with uvicorn: ``python -m file_converter``."""

from __future__ import annotations

import os

import uvicorn


def main() -> None:
	host = os.getenv("FC_HOST", "0.0.0.0")
	port = int(os.getenv("FC_PORT", "8000"))

	uvicorn.run(
		"file_converter.app:create_app",
		factory=True,
		host=host,
		port=port,
		reload=False,
	)


if __name__ == "__main__":
	main()
