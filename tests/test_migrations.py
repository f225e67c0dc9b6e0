from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

ROOT = Path(__file__).resolve().parent.parent


def test_upgrade_creates_schema(tmp_path):
    url = f"sqlite:///{tmp_path / 'migrated.db'}"
    cfg = Config(str(ROOT / "alembic.ini"))
    cfg.set_main_option("sqlalchemy.url", url)
    cfg.attributes["configure_logger"] = False

    command.upgrade(cfg, "head")

    inspector = inspect(create_engine(url))
    assert {"users", "sessions", "reviews", "assets"} <= set(inspector.get_table_names())
    review_columns = {c["name"] for c in inspector.get_columns("reviews")}
    assert {"user_id", "artist_id", "star_rating", "created_at"} <= review_columns
    unique_username = [
        ix for ix in inspector.get_indexes("users") if ix["column_names"] == ["username"]
    ]
    assert unique_username and unique_username[0]["unique"]

    command.downgrade(cfg, "base")
    assert "reviews" not in inspect(create_engine(url)).get_table_names()
