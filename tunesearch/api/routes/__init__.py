"""API Routes."""
from tunesearch.api.routes.youtube import router as youtube_router
from tunesearch.api.routes.soundcloud import router as soundcloud_router
from tunesearch.api.routes.health import router as health_router

__all__ = ["youtube_router", "soundcloud_router", "health_router"]
