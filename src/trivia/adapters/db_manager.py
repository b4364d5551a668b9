import os
import sqlite3
from typing import Any

from src.shared.telemetry import Telemetry, measure_time
from src.trivia.domain.errors import StorageError


class DatabaseManager:
    """
    Responsible for:
    1. Managing the SQLite connection lifecycle.
    2. Creating the key-value schema on first use.
    3. Staying pickle-safe inside Streamlit session state.

    Every sqlite3 failure leaves this class as a StorageError.
    """

    def __init__(self, db_path: str = "data/quiz.db") -> None:
        self.db_path = db_path
        self.telemetry = Telemetry("DatabaseManager")
        self._shared_connection: sqlite3.Connection | None = None
        self._schema_ready = False

    # --- SERIALIZATION LOGIC (Pickle Safety) ---
    def __getstate__(self) -> dict[str, Any]:
        state = self.__dict__.copy()
        state.pop("_shared_connection", None)
        return state

    def __setstate__(self, state: dict[str, Any]) -> None:
        self.__dict__.update(state)
        self._shared_connection = None
        # An in-memory database does not survive this; file paths reconnect lazily.
        if self.db_path == ":memory:":
            self._schema_ready = False

    @property
    def is_memory(self) -> bool:
        return self.db_path == ":memory:"

    def get_connection(self) -> sqlite3.Connection:
        """Returns a usable connection with the schema in place."""
        if self._shared_connection:
            try:
                self._shared_connection.execute("SELECT 1")
                return self._shared_connection
            except sqlite3.ProgrammingError:
                # Closed externally
                self._shared_connection = None
                if self.is_memory:
                    self._schema_ready = False

        try:
            self._ensure_db_dir()
            conn = sqlite3.connect(self.db_path, check_same_thread=False)
            if not self.is_memory:
                conn.execute("PRAGMA journal_mode=WAL")
        except (OSError, sqlite3.Error) as e:
            self.telemetry.log_error("Connection failed", e, db_path=self.db_path)
            raise StorageError(f"Cannot open {self.db_path}: {e}") from e

        if not self._schema_ready:
            try:
                self._init_schema(conn)
            except StorageError:
                conn.close()
                raise

        self._shared_connection = conn
        return conn

    def close(self) -> None:
        if self._shared_connection:
            self._shared_connection.close()
            self._shared_connection = None
        if self.is_memory:
            self._schema_ready = False

    def _ensure_db_dir(self) -> None:
        if self.is_memory:
            return
        dir_name = os.path.dirname(self.db_path)
        if dir_name:
            os.makedirs(dir_name, exist_ok=True)

    @measure_time("db_init_schema")
    def _init_schema(self, conn: sqlite3.Connection) -> None:
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS key_value
                (
                    key        TEXT PRIMARY KEY,
                    value      TEXT NOT NULL,
                    updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
                )
                """
            )
            conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Schema init failed: {e}") from e
        self._schema_ready = True
