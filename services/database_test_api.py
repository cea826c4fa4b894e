"""
Database Test API
Connectivity check and ad-hoc inspection endpoints
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends
from loguru import logger

from services.database import PostgresManager
from services.database.models import DatabaseTestRequest, Envelope, ErrorEnvelope
from services.dependencies import get_database
from services.responses import APIError, success_response

router = APIRouter(prefix="/api/database", tags=["Database"])


def single_statement(sql: str) -> str:
    """
    Strip one trailing semicolon and refuse any other

    Raises:
        ValueError: If the text holds more than one statement
    """
    statement = sql.strip().rstrip(";").rstrip()
    if not statement:
        raise ValueError("Query is empty")
    if ";" in statement:
        raise ValueError("Only a single SQL statement is allowed")
    return statement


def run_read_only(db: PostgresManager, sql: str) -> List[Dict[str, Any]]:
    """
    Run a client-supplied statement inside a read-only transaction

    The transaction is always rolled back. db should be a short-lived
    manager so the connection never returns to the shared pool.
    """
    statement = single_statement(sql)
    connection = db.begin_transaction()
    try:
        with connection.cursor() as cursor:
            cursor.execute("SET TRANSACTION READ ONLY")
            cursor.execute(statement)
            if cursor.description is None:
                return []
            return [dict(row) for row in cursor.fetchall()]
    finally:
        db.rollback_transaction(connection)


def inspect_database(db: PostgresManager, request: DatabaseTestRequest,
                     include_tables: bool) -> Dict[str, Any]:
    """
    Run the optional operations of a test request

    Each operation stores either its result or its error message, so one
    failing operation does not hide the others.
    """
    result: Dict[str, Any] = {}

    if request.query:
        try:
            result["customQueryResult"] = run_read_only(db, request.query)
        except Exception as e:
            logger.warning(f"Custom query failed: {e}")
            result["customQueryError"] = str(e)

    if not include_tables:
        return result

    tables: Optional[List[str]] = None
    try:
        tables = db.get_tables()
        result["tables"] = tables
    except Exception as e:
        logger.warning(f"Listing tables failed: {e}")
        result["tablesError"] = str(e)

    if request.tableName:
        if tables is None:
            result["tableStructureError"] = "Table list unavailable"
        elif request.tableName not in tables:
            result["tableStructureError"] = (
                f"Table '{request.tableName}' does not exist in database '{request.databaseName}'"
            )
        else:
            try:
                result["tableStructure"] = db.describe_table(request.tableName)
            except Exception as e:
                logger.warning(f"Describing table {request.tableName} failed: {e}")
                result["tableStructureError"] = str(e)

    return result


@router.get(
    "/test",
    response_model=Envelope,
    responses={500: {"model": ErrorEnvelope, "description": "Connection failed"}},
    summary="Test the database connection",
)
def test_database(db: PostgresManager = Depends(get_database)):
    """Check connectivity and list the databases on the server"""
    try:
        if not db.test_connection():
            raise APIError(500, "Database connection failed")

        databases = db.get_databases()
    except APIError:
        raise
    except Exception as e:
        logger.error(f"Database test error: {e}")
        raise APIError(
            500, "Database connection test failed", error=str(e), details=db.config.masked()
        )

    data = {"connectionStatus": "connected", "availableDatabases": databases}
    data.update(db.config.masked())
    return success_response("Database connection successful", data)


@router.post(
    "/test",
    response_model=Envelope,
    responses={500: {"model": ErrorEnvelope, "description": "Operation failed"}},
    summary="Run inspection operations against a database",
)
def run_database_operations(
    payload: Optional[DatabaseTestRequest] = Body(None),
    db: PostgresManager = Depends(get_database),
):
    """
    Optionally run a read-only query, list tables and describe a table

    Table listing and description need databaseName. Every operation runs
    on a separate short-lived connection, never on the shared pool.
    """
    payload = payload or DatabaseTestRequest()
    if not payload.query and not payload.databaseName:
        return success_response("Database operations completed", {})

    database_name = payload.databaseName or db.config.database

    try:
        with db.for_database(database_name) as target:
            result = inspect_database(target, payload, include_tables=bool(payload.databaseName))
    except Exception as e:
        logger.error(f"Database operation error: {e}")
        raise APIError(500, "Database operation failed", error=str(e))

    return success_response("Database operations completed", result)
