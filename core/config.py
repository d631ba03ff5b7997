"""
配置文件 - 项目配置管理
"""
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from pydantic import AliasChoices, BaseModel, Field, field_validator
from typing import Annotated, Optional


DEFAULT_OWNER = "ST1PQHQKV0RJXZFY1DGX8MNSNYVE3VGZJSRTPGZGM"


class PaymentSettings(BaseModel):
    owner: str = DEFAULT_OWNER
    fee_vault_address: str = DEFAULT_OWNER
    class_registry_address: str = "ST1PQHQKV0RJXZFY1DGX8MNSNYVE3VGZJSRTPGZGM.class-registry"
    platform_fee_percent: int = Field(default=2, ge=1, le=10)
    settlement_token: str = "STX"
    # ledger: in-process journal + balances
    settlement_backend: str = "ledger"
    neutral_principal: str = "SP000000000000000000002Q6VF78"
    strict_balances: bool = False


class ClassRegistrySettings(BaseModel):
    owner: str = DEFAULT_OWNER
    platform_fee_recipient: str = DEFAULT_OWNER
    max_classes: int = 1000
    max_classes_per_instructor: int = 200
    max_title_length: int = 100
    max_description_length: int = 500
    max_capacity: int = 500


class AttendanceSettings(BaseModel):
    owner: str = DEFAULT_OWNER
    class_registry_address: str = "ST1PQHQKV0RJXZFY1DGX8MNSNYVE3VGZJSRTPGZGM.class-registry"
    payment_processor_address: str = "ST1PQHQKV0RJXZFY1DGX8MNSNYVE3VGZJSRTPGZGM.payment-processor"
    checkin_window_blocks: int = 30
    max_attendance_per_class: int = 500


class ChainSettings(BaseModel):
    initial_block_height: int = Field(default=0, ge=0)
    # None: follow DEBUG
    allow_manual_advance: Optional[bool] = None


class Settings(BaseSettings):
    """项目配置"""

    # 基础配置
    PROJECT_NAME: str = Field(
        default="ClassPay Marketplace",
        validation_alias=AliasChoices("PROJECT_NAME", "APP_NAME"),
    )
    VERSION: str = Field(default="1.0.0", validation_alias=AliasChoices("VERSION", "APP_VERSION"))
    DEBUG: bool = True
    ENVIRONMENT: str = "development"

    # 分组配置：支付 / 课程 / 签到 / 区块时钟 采用嵌套模型
    payments: PaymentSettings = Field(default_factory=PaymentSettings)
    classes: ClassRegistrySettings = Field(default_factory=ClassRegistrySettings)
    attendance: AttendanceSettings = Field(default_factory=AttendanceSettings)
    chain: ChainSettings = Field(default_factory=ChainSettings)

    # CORS配置
    CORS_ORIGINS: Annotated[list, NoDecode] = Field(default=["http://localhost:3000", "http://localhost:8000"])

    # 日志/请求体记录配置
    LOG_REQUEST_BODY_ENABLE_BY_DEFAULT: bool = True
    LOG_REQUEST_BODY_MAX_BYTES: int = 2048

    # pydantic-settings v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        env_nested_delimiter="__",
        populate_by_name=True,
    )

    @property
    def manual_advance_allowed(self) -> bool:
        if self.chain.allow_manual_advance is None:
            return self.DEBUG
        return self.chain.allow_manual_advance

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _parse_cors_origins(cls, v):
        """允许 JSON 字符串或逗号分隔字符串两种格式。"""
        if isinstance(v, list):
            return v
        if isinstance(v, str):
            s = v.strip()
            if s.startswith("[") and s.endswith("]"):
                import json
                try:
                    arr = json.loads(s)
                    if isinstance(arr, list):
                        return arr
                except ValueError:
                    pass
            if "," in s:
                return [item.strip() for item in s.split(",") if item.strip()]
            return [s]
        return v


settings = Settings()
