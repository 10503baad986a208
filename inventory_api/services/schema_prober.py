from typing import Set

from sqlalchemy import inspect
from sqlalchemy.orm import Session


class SchemaProber:
    """
    Reports which columns a table currently has.

    Inspection runs on the session's own connection every time it is
    asked, so a column added while the service is running is picked up
    by the next request.
    """

    def __init__(self, db: Session):
        self.db = db

    def has_table(self, table: str) -> bool:
        return inspect(self.db.connection()).has_table(table)

    def columns(self, table: str) -> Set[str]:
        """
        Get the column names of a table.

        Args:
            table: Table name

        Returns:
            Set of column names, empty if the table does not exist
        """
        inspector = inspect(self.db.connection())
        if not inspector.has_table(table):
            return set()
        return {column["name"] for column in inspector.get_columns(table)}
