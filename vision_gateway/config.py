"""
Конфигурация Vision Gateway.

Все значения читаются из .env файла (или переменных окружения).
Обязателен только ключ сервисного аккаунта Google — остальное
имеет рабочие значения по умолчанию.

Единый префикс: OCR_
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

from vision_gateway.schemas import ServiceAccountIdentity

# Области доступа токена: Vision + общая для Text-to-Speech
VISION_SCOPE = "https://www.googleapis.com/auth/cloud-vision"
CLOUD_PLATFORM_SCOPE = "https://www.googleapis.com/auth/cloud-platform"


class Settings(BaseSettings):
    """
    Настройки Vision Gateway.

    Читает переменные с префиксом OCR_ из .env файла.
    Ключ сервисного аккаунта передаётся как JSON целиком:
        OCR_GOOGLE_SERVICE_ACCOUNT='{"client_email": "...", "private_key": "...", ...}'
    """

    model_config = SettingsConfigDict(
        env_prefix="OCR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Сервер ---
    port: int = 8000

    # --- Авторизация: сервисный аккаунт Google ---
    google_service_account: ServiceAccountIdentity
    token_url: str = "https://oauth2.googleapis.com/token"
    scopes: list[str] = [VISION_SCOPE, CLOUD_PLATFORM_SCOPE]

    # --- Внешние сервисы ---
    vision_url: str = "https://vision.googleapis.com/v1/images:annotate"
    tts_url: str = "https://texttospeech.googleapis.com/v1/text:synthesize"
    timeout_seconds: float = 60.0

    # --- Лимиты ---
    max_file_size_mb: int = 20

    # --- Split: PDF -> images ---
    render_scale: float = 1.5

    # --- TTS: параметры голоса ---
    tts_language_code: str = "en-US"
    tts_voice_name: str = "en-US-Neural2-F"
    tts_ssml_gender: str = "FEMALE"
    tts_audio_encoding: str = "MP3"


# Глобальный экземпляр настроек
settings = Settings()
