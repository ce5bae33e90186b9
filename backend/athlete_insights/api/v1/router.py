"""API v1 router aggregating all endpoint routers.

Every endpoint is stateless: callers post already-fetched data and get the
derived metrics back.

Sleep:
  /api/v1/sleep/days, /api/v1/sleep/summary

Readiness:
  /api/v1/readiness, /api/v1/readiness/series

Team:
  /api/v1/team/stats

Genetics:
  /api/v1/genetics/traits, /health, /breakdown
"""

from fastapi import APIRouter

from athlete_insights.api.v1.endpoints import genetics, readiness, sleep, team

api_router = APIRouter()

# -------------------------------------------------------------------------
# Sleep reconstruction
# -------------------------------------------------------------------------
api_router.include_router(sleep.router, prefix="/sleep", tags=["sleep"])

# -------------------------------------------------------------------------
# Readiness
# -------------------------------------------------------------------------
api_router.include_router(readiness.router, prefix="/readiness", tags=["readiness"])

# -------------------------------------------------------------------------
# Team view
# -------------------------------------------------------------------------
api_router.include_router(team.router, prefix="/team", tags=["team"])

# -------------------------------------------------------------------------
# Genetics
# -------------------------------------------------------------------------
api_router.include_router(genetics.router, prefix="/genetics", tags=["genetics"])
