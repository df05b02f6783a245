from dataclasses import dataclass
import os
from typing import Optional


@dataclass
class ConsumerSettings:
    environment_url: Optional[str] = None
    application_key: Optional[str] = None
    shared_secret: Optional[str] = None
    user_token: Optional[str] = None
    solution_id: Optional[str] = None
    instance_id: Optional[str] = None
    consumer_name: Optional[str] = None
    authentication_method: str = "Basic"
    environment_type: str = "DIRECT"
    infrastructure_version: str = "3.2.1"
    data_model_namespace: str = "http://www.sifassociation.org/datamodel/au/3.4"
    delete_on_unregister: bool = False
    request_timeout_seconds: float = 30.0

    @classmethod
    def from_env(cls) -> "ConsumerSettings":
        return cls(
            environment_url=os.getenv("SIF_CONSUMER_ENVIRONMENT_URL"),
            application_key=os.getenv("SIF_CONSUMER_APPLICATION_KEY"),
            shared_secret=os.getenv("SIF_CONSUMER_SHARED_SECRET"),
            user_token=os.getenv("SIF_CONSUMER_USER_TOKEN"),
            solution_id=os.getenv("SIF_CONSUMER_SOLUTION_ID"),
            instance_id=os.getenv("SIF_CONSUMER_INSTANCE_ID"),
            consumer_name=os.getenv("SIF_CONSUMER_CONSUMER_NAME"),
            authentication_method=os.getenv("SIF_CONSUMER_AUTHENTICATION_METHOD", "Basic"),
            environment_type=os.getenv("SIF_CONSUMER_ENVIRONMENT_TYPE", "DIRECT"),
            infrastructure_version=os.getenv("SIF_CONSUMER_INFRASTRUCTURE_VERSION", "3.2.1"),
            data_model_namespace=os.getenv(
                "SIF_CONSUMER_DATA_MODEL_NAMESPACE", "http://www.sifassociation.org/datamodel/au/3.4"
            ),
            delete_on_unregister=os.getenv("SIF_CONSUMER_DELETE_ON_UNREGISTER", "false").lower() == "true",
            request_timeout_seconds=float(os.getenv("SIF_CONSUMER_REQUEST_TIMEOUT", "30.0")),
        )
