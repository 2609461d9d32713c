"""
Configuration settings for the data layer
"""

import os
from typing import Optional
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application settings"""
    
    # Database
    MONGODB_URL: Optional[str] = os.getenv("MONGODB_URL")
    MONGODB_DB_NAME: str = os.getenv("MONGODB_DB_NAME", "eventbooking")
    
    # Connection pool
    MONGODB_MAX_POOL_SIZE: int = 10
    MONGODB_SERVER_SELECTION_TIMEOUT_MS: int = 5000  # 5s
    MONGODB_SOCKET_TIMEOUT_MS: int = 45000  # 45s idle
    MONGODB_BUFFER_COMMANDS: bool = False
    
    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    
    class Config:
        env_file = ".env"

settings = Settings()
