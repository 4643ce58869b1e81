from __future__ import annotations

import importlib
from pathlib import Path

from dotenv import load_dotenv

from config import get_settings_module
from english_center.app_logger import setup_logging
from english_center.database.bootstrap import apply_seed_sql
from english_center.database.connection import DBConfig


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    config = DBConfig.from_dict(dict(settings.DB_CONFIG))

    seed_path = Path(__file__).resolve().parents[1] / "database" / "seed.sql"
    apply_seed_sql(config, seed_path=seed_path)
    print(f"OK: Seeded database -> {config.describe()}")


if __name__ == "__main__":
    main()
