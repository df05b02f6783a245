from typing import Optional, Protocol


class Transport(Protocol):
    def get(
        self,
        url: str,
        token: str,
        navigation_page: Optional[int] = None,
        navigation_page_size: Optional[int] = None,
    ) -> str:
        ...

    def post(
        self,
        url: str,
        token: str,
        body: Optional[str] = None,
        method_override: Optional[str] = None,
        content_type: Optional[str] = None,
        accept: Optional[str] = None,
    ) -> str:
        ...

    def put(
        self,
        url: str,
        token: str,
        body: Optional[str] = None,
        method_override: Optional[str] = None,
        content_type: Optional[str] = None,
        accept: Optional[str] = None,
    ) -> str:
        ...

    def delete(
        self,
        url: str,
        token: str,
        body: Optional[str] = None,
        content_type: Optional[str] = None,
        accept: Optional[str] = None,
    ) -> str:
        ...
