# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for Supabase database operations.
# It implements the singleton pattern to reuse a single client connection
# and provides generic record helpers shared by every service:
# - fetch_by_id / fetch_many / fetch_by_ids / count
# - insert / update / delete
#
# Records are flat rows. Per-language values live in suffixed columns
# (title_en, title_zh...) and list values in JSON/array columns.
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   article = SupabaseClient.fetch_by_id("articles", article_id)
#   rows = SupabaseClient.fetch_many("tags", filters={"media_id": media_id})
# =============================================================================

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from supabase import create_client, Client

from app.config import settings

# Set up logging for this module
logger = logging.getLogger(__name__)

# PostgREST code returned by .single() when no row matches
NOT_FOUND_CODE = "PGRST116"


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Carries a code, an actionable suggestion and debugging details.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


class SupabaseClient:
    """
    Typed wrapper for Supabase database operations.

    Implements singleton pattern - one client instance is shared across
    the application. All methods are class methods for easy access without
    instantiation.

    Example:
        article = SupabaseClient.fetch_by_id("articles", "550e8400-...")
        published = SupabaseClient.fetch_many(
            "articles",
            filters={"media_id": media_id, "is_published": True},
            order_by="published_at",
            desc=True,
            limit=20,
        )
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS).
        Tenant isolation is enforced by the services (every query filters
        on media_id).

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance

    @classmethod
    def _normalize_uuid(cls, uuid_value: str | UUID) -> str:
        """Convert UUID to string for queries."""
        return str(uuid_value) if isinstance(uuid_value, UUID) else uuid_value

    # -------------------------------------------------------------------------
    # Read Operations
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_by_id(
        cls,
        table: str,
        record_id: str | UUID,
        columns: str = "*",
    ) -> dict[str, Any] | None:
        """
        Fetch a single record by ID.

        Args:
            table: Table name
            record_id: The record UUID
            columns: Columns to select (default: all)

        Returns:
            Record dict, or None if not found

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()
        record_id_str = cls._normalize_uuid(record_id)

        try:
            response = (
                client.table(table)
                .select(columns)
                .eq("id", record_id_str)
                .single()
                .execute()
            )

            return response.data

        except Exception as e:
            if NOT_FOUND_CODE in str(e):
                return None
            raise SupabaseClientError(
                message=f"Failed to fetch {table} record: {e}",
                code="FETCH_FAILED",
                suggestion=f"Check that the {table} table is accessible",
                details={"table": table, "id": record_id_str}
            )

    @classmethod
    def fetch_many(
        cls,
        table: str,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        desc: bool = False,
        limit: int | None = None,
        offset: int = 0,
        columns: str = "*",
        contains: dict[str, list[Any]] | None = None,
        in_filters: dict[str, list[Any]] | None = None,
    ) -> list[dict[str, Any]]:
        """
        Fetch records matching equality filters.

        Args:
            table: Table name
            filters: Column -> value equality filters
            order_by: Column to order by
            desc: Descending order
            limit: Maximum rows
            offset: Rows to skip (used with limit for pagination)
            columns: Columns to select
            contains: Array column -> values that must all be present
            in_filters: Column -> allowed values

        Returns:
            List of record dicts (empty when nothing matches)

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()

        try:
            query = client.table(table).select(columns)

            for column, value in (filters or {}).items():
                query = query.eq(column, value)
            for column, values in (contains or {}).items():
                query = query.contains(column, values)
            for column, values in (in_filters or {}).items():
                query = query.in_(column, values)

            if order_by:
                query = query.order(order_by, desc=desc)
            if limit is not None:
                query = query.range(offset, offset + limit - 1)

            response = query.execute()
            rows = response.data or []

            logger.debug(f"Fetched {len(rows)} rows from {table}")
            return rows

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch {table} records: {e}",
                code="FETCH_MANY_FAILED",
                suggestion=f"Check the filters and that the {table} table is accessible",
                details={"table": table, "filters": filters or {}}
            )

    @classmethod
    def fetch_by_ids(
        cls,
        table: str,
        record_ids: list[str],
        columns: str = "*",
    ) -> list[dict[str, Any]]:
        """
        Fetch several records by ID in one query.

        Returns an empty list without querying when record_ids is empty.
        """
        ids = [cls._normalize_uuid(i) for i in record_ids if i]
        if not ids:
            return []
        return cls.fetch_many(table, columns=columns, in_filters={"id": ids})

    @classmethod
    def count(
        cls,
        table: str,
        filters: dict[str, Any] | None = None,
    ) -> int:
        """
        Count records matching equality filters.

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()

        try:
            query = client.table(table).select("id", count="exact")
            for column, value in (filters or {}).items():
                query = query.eq(column, value)
            response = query.execute()
            return response.count or 0

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to count {table} records: {e}",
                code="COUNT_FAILED",
                details={"table": table, "filters": filters or {}}
            )

    # -------------------------------------------------------------------------
    # Write Operations
    # -------------------------------------------------------------------------

    @classmethod
    def insert(cls, table: str, data: dict[str, Any]) -> dict[str, Any]:
        """
        Insert a record and return it with generated fields (id, created_at).

        Raises:
            SupabaseClientError: If insert fails or returns no data
        """
        client = cls.get_client()

        try:
            response = (
                client.table(table)
                .insert(data)
                .execute()
            )

            if response.data:
                return response.data[0]
            raise SupabaseClientError(
                message="Insert returned no data",
                code="INSERT_NO_DATA",
                details={"table": table}
            )

        except SupabaseClientError:
            raise
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to insert into {table}: {e}",
                code="INSERT_FAILED",
                suggestion="Check that all required columns are provided",
                details={"table": table}
            )

    @classmethod
    def update(
        cls,
        table: str,
        record_id: str | UUID,
        data: dict[str, Any],
    ) -> dict[str, Any] | None:
        """
        Update a record by ID.

        Returns:
            Updated record dict, or None if no row matched

        Raises:
            SupabaseClientError: If update fails
        """
        client = cls.get_client()
        record_id_str = cls._normalize_uuid(record_id)

        try:
            response = (
                client.table(table)
                .update(data)
                .eq("id", record_id_str)
                .execute()
            )

            if response.data:
                return response.data[0]
            return None

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to update {table} record: {e}",
                code="UPDATE_FAILED",
                details={"table": table, "id": record_id_str}
            )

    @classmethod
    def delete(cls, table: str, record_id: str | UUID) -> bool:
        """
        Delete a record by ID.

        Returns:
            True if a row was deleted

        Raises:
            SupabaseClientError: If delete fails
        """
        client = cls.get_client()
        record_id_str = cls._normalize_uuid(record_id)

        try:
            response = (
                client.table(table)
                .delete()
                .eq("id", record_id_str)
                .execute()
            )
            return bool(response.data)

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to delete {table} record: {e}",
                code="DELETE_FAILED",
                details={"table": table, "id": record_id_str}
            )
