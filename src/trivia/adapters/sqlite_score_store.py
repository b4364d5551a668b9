import sqlite3

from src.config import GameConfig
from src.shared.telemetry import Telemetry, measure_time
from src.trivia.adapters.db_manager import DatabaseManager
from src.trivia.domain.errors import StorageError
from src.trivia.domain.ports import IScoreStore


class SQLiteScoreStore(IScoreStore):
    """Single persisted slot holding the high score as a string-encoded integer."""

    def __init__(self, db_manager: DatabaseManager, key: str = GameConfig.HIGH_SCORE_KEY) -> None:
        self.telemetry = Telemetry("SQLiteScoreStore")
        self.db_manager = db_manager
        self.key = key

    @measure_time("db_load_high_score")
    def load(self) -> int:
        conn = self.db_manager.get_connection()
        try:
            row = conn.execute(
                "SELECT value FROM key_value WHERE key = ?", (self.key,)
            ).fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Cannot read {self.key}: {e}") from e

        if row is None:
            return 0
        return self.parse(row[0])

    @measure_time("db_save_high_score")
    def save(self, value: int) -> None:
        if value < 0:
            raise ValueError("High score cannot be negative")

        conn = self.db_manager.get_connection()
        try:
            conn.execute(
                "INSERT INTO key_value (key, value, updated_at) "
                "VALUES (?, ?, CURRENT_TIMESTAMP) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value, "
                "updated_at = excluded.updated_at "
                "WHERE CAST(key_value.value AS INTEGER) < CAST(excluded.value AS INTEGER)",
                (self.key, str(value)),
            )
            conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Cannot write {self.key}: {e}") from e

        self.telemetry.log_info("High score persisted", key=self.key, value=value)

    def parse(self, raw: str) -> int:
        try:
            value = int(raw)
        except (TypeError, ValueError):
            self.telemetry.log_warning("Ignoring unreadable stored value", key=self.key, raw=raw)
            return 0
        return value if value >= 0 else 0
