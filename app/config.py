from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    zendesk_subdomain: str = ""
    zendesk_email: str = ""
    zendesk_api_token: str = ""
    log_level: str = "INFO"

    early_hangup_threshold_sec: float = 20

    # Zendesk comment body limits
    max_transcript_chars: int = 30000
    max_vars_json_chars: int = 6000
    max_call_summary_chars: int = 6000
    max_qa_body_chars: int = 60000

    # Retell webhooks carry transcript + tool calls + analysis
    max_body_bytes: int = 10 * 1024 * 1024

    business_timezone: str = "America/Los_Angeles"
    business_open_hour: int = 8
    business_open_minute: int = 0
    business_close_hour: int = 20
    business_close_minute: int = 0
    business_days: str = "Mon,Tue,Wed,Thu,Fri,Sat"
    business_holiday_country: str = ""

    @property
    def zendesk_configured(self) -> bool:
        return bool(
            self.zendesk_subdomain and self.zendesk_email and self.zendesk_api_token
        )
