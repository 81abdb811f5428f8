"""
Database Setup Script
Applies app/database/schema.sql to Supabase statement by statement through the
exec_sql RPC. Statements the RPC rejects are listed for manual execution in the
Supabase SQL editor.
"""

import re
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from app.config import settings
from app.database.supabase_client import SupabaseClient
from supabase import Client
from typing import List, Tuple
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

SCHEMA_PATH = project_root / "app" / "database" / "schema.sql"


def split_statements(schema: str) -> List[str]:
    """Split on statement-terminating semicolons, dropping comment lines and blanks."""
    lines = [line for line in schema.splitlines() if not line.strip().startswith("--")]
    statements = re.split(r";\s*\n", "\n".join(lines) + "\n")
    return [s.strip().rstrip(";") for s in statements if s.strip()]


def summarize(statement: str) -> str:
    return " ".join(statement.split())[:60] + "..."


def apply_statements(supabase: Client, statements: List[str]) -> Tuple[int, List[str]]:
    """Run each statement; returns the success count and the statements that failed."""
    succeeded = 0
    manual = []
    for statement in statements:
        try:
            supabase.rpc("exec_sql", {"sql": statement + ";"}).execute()
            logger.info(f"Applied: {summarize(statement)}")
            succeeded += 1
        except Exception as e:
            logger.warning(f"Statement needs manual execution: {summarize(statement)} ({e})")
            manual.append(statement)
    return succeeded, manual


def main():
    """Main function to apply the schema"""
    if not settings.supabase_url or not settings.supabase_service_role_key:
        logger.error("Missing Supabase credentials. Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY.")
        sys.exit(1)

    try:
        supabase = SupabaseClient.get_service_client()
        statements = split_statements(SCHEMA_PATH.read_text(encoding="utf-8"))

        logger.info(f"Starting database setup against {settings.supabase_url}")
        succeeded, manual = apply_statements(supabase, statements)

        logger.info(f"Results: {succeeded} succeeded, {len(manual)} need manual execution")
        if manual:
            logger.warning(
                f"Some statements could not be executed via the API. "
                f"Run {SCHEMA_PATH} in the Supabase SQL Editor."
            )
            sys.exit(2)
    except Exception as e:
        logger.error(f"Error during database setup: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
