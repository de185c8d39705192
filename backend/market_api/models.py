from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CustomModel(BaseModel):
    """
    프로젝트의 모든 Pydantic 스키마가 상속받는 공통 기본 모델.
    API 데이터 정책을 중앙에서 관리합니다.
    """
    model_config = ConfigDict(
        # True일 경우, 필드 별칭(alias)으로도 값을 할당할 수 있습니다.
        populate_by_name=True,

        # 정의되지 않은 필드는 거부합니다.
        extra="forbid",
    )


class CamelModel(CustomModel):
    """
    응답 필드를 camelCase 별칭으로 직렬화하는 모델.
    프론트엔드가 읽는 메타데이터 키(modelUsed 등)를 그대로 유지하기 위해 사용합니다.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        protected_namespaces=(),
    )
