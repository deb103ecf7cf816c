"""Self-test harness API router."""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Query

from app.tests.harness import TestHarness


def create_testing_router(ctx) -> APIRouter:
    """Create the testing router with a harness logging into ctx.logs_dir."""
    router = APIRouter(tags=["testing"])
    logger = logging.getLogger("summarizer.api.testing")
    harness = TestHarness(ctx.logs_dir)

    @router.get("/api/test/suites")
    async def list_suites():
        return {"status": "ok", "suites": harness.get_available_suites()}

    @router.api_route("/api/test/run", methods=["GET", "POST"])
    async def run_tests(
        suite: Optional[str] = Query(None, description="Suite ID to run"),
        all_suites: bool = Query(False, alias="all", description="Run all suites"),
    ):
        """Run one suite (?suite=<id>) or every suite (?all=true)."""
        logger.info("Test run requested: suite=%s all=%s", suite, all_suites)
        if all_suites:
            return await harness.run_all()
        if suite:
            return await harness.run_suite(suite)
        return {
            "status": "error",
            "message": "Specify ?suite=<suite_id> or ?all=true",
            "available_suites": list(harness.suites),
        }

    return router
