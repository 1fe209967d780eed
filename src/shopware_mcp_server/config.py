from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import SecretStr

class Settings(BaseSettings):
    openai_api_key: SecretStr = SecretStr("")
    embedding_model: str = "text-embedding-3-large"
    embedding_api_url: str = "https://api.openai.com/v1/embeddings"
    embedding_timeout: float = 60.0

    # Product catalog snapshot, loaded once per process
    catalog_csv_path: str = "data/weltmannproducts.csv"
    catalog_default_limit: int = 20
    catalog_max_limit: int = 100

    # Stripped from product names in human-readable replies
    manufacturer_name_prefix: str = "JAEGER automotive"

    vector_index_path: str = "data/products_index.bin"
    vector_meta_path: str = "data/products_meta.json"
    vector_search_k: int = 10

    # Shopware Admin API; obtaining the access token is handled outside this service
    shopware_api_url: str = ""
    shopware_access_token: SecretStr = SecretStr("")
    shopware_timeout: float = 10.0

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore"
    )

settings = Settings()
