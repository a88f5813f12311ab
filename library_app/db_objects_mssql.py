from sqlalchemy import text
from library_app.extensions import db

# Rejects any write that would push a book's stock outside 0..total_quantity,
# whatever path the write came from.
TRIGGER_SQL = r"""
IF OBJECT_ID(N'dbo.books', N'U') IS NOT NULL
   AND OBJECT_ID(N'dbo.trg_books_stock_guard', N'TR') IS NULL
BEGIN
    EXEC('
    CREATE TRIGGER dbo.trg_books_stock_guard
    ON dbo.books
    AFTER INSERT, UPDATE
    AS
    BEGIN
        SET NOCOUNT ON;

        IF EXISTS (
            SELECT 1
            FROM inserted i
            WHERE i.available_quantity < 0
               OR i.available_quantity > i.total_quantity
               OR i.borrow_count < 0
        )
        BEGIN
            RAISERROR(''Book stock out of range'', 16, 1);
            ROLLBACK TRANSACTION;
            RETURN;
        END
    END
    ')
END
"""

STATEMENTS = (TRIGGER_SQL,)


def ensure_db_objects_mssql(app):
    """Create the SQL Server-only guard objects. Other dialects are skipped."""
    with app.app_context():
        if db.engine.dialect.name != "mssql":
            app.logger.debug(f"[db_objects_mssql] skipped for dialect {db.engine.dialect.name}.")
            return False

        conn = db.engine.connect()
        trans = conn.begin()
        try:
            for statement in STATEMENTS:
                conn.execute(text(statement))
            trans.commit()
            app.logger.info("[db_objects_mssql] stock guard trigger ensured.")
            return True
        except Exception as e:
            trans.rollback()
            app.logger.error(f"[db_objects_mssql] error: {e}")
            raise
        finally:
            conn.close()
