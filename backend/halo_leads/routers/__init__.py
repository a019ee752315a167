"""
API routers.
"""
from .leads import router as leads_router
from .marketing_leads import router as marketing_leads_router
from .campaigns import router as campaigns_router
from .dashboard import router as dashboard_router

__all__ = ["leads_router", "marketing_leads_router", "campaigns_router", "dashboard_router"]
