"""педработник.рф consultant: safety screen, intent routing and domain handlers.

Usage:
    from app.config import get_settings
    from app.consultant.service import ConsultantService

    service = ConsultantService.from_settings(get_settings())
    result = await service.run("Как подать документы?", chat_id="42")
"""

from .errors import ConfigurationError, ConsultantError, MissingOutputError, WorkflowError

__all__ = ["ConfigurationError", "ConsultantError", "MissingOutputError", "WorkflowError"]
