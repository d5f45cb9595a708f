"""Settings for the Call Insight Relay."""

import zoneinfo

import pydantic
import pydantic_settings

SettingsConfigDict = pydantic_settings.SettingsConfigDict
BaseSettings = pydantic_settings.BaseSettings
field_validator = pydantic.field_validator


class Settings(BaseSettings):
  """Settings for the Call Insight Relay."""

  model_config = SettingsConfigDict(env_file='.env', env_file_encoding='utf-8')
  APP_NAME: str = 'Call Insight Relay'

  # CRM
  PIPEDRIVE_API_TOKEN: str
  PIPEDRIVE_API_URL: str = 'https://api.pipedrive.com/v1'
  # Base for the person/deal/mail links shown on the card.
  PIPEDRIVE_APP_URL: str = 'https://app.pipedrive.com'

  # Telephony Service
  AIRCALL_API_ID: str
  AIRCALL_API_TOKEN: str
  AIRCALL_API_URL: str = 'https://api.aircall.io/v1'

  # Card rendering, an IANA zone name such as 'Europe/Paris'.
  DISPLAY_TIMEZONE: str = 'UTC'

  PORT: int = 3000
  LOG_LEVEL: str = 'INFO'

  @field_validator('DISPLAY_TIMEZONE')
  @classmethod
  def _known_timezone(cls, value: str) -> str:
    try:
      zoneinfo.ZoneInfo(value)
    except (zoneinfo.ZoneInfoNotFoundError, ValueError) as e:
      raise ValueError(f'unknown timezone {value!r}') from e
    return value


settings = Settings()
