from stoploss.models.incident import IncidentList, IncidentRequest
from stoploss.models.settings import SettingsUpdate

__all__ = ["IncidentRequest", "IncidentList", "SettingsUpdate"]
