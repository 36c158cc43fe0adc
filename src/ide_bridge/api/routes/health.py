from fastapi import APIRouter

from ide_bridge import PLUGIN_NAME, __version__
from ide_bridge.models import Health

router = APIRouter()


@router.get("/health", response_model=Health)
def health() -> Health:
    """Liveness probe; does not touch editor state."""
    return Health(plugin=PLUGIN_NAME, version=__version__)
