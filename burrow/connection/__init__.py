from .connection_config import ConnectionConfig
from .connection_manager import ConnectionManager
from .handle_state import HandleState
