# domains/tracking/registry.py
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Optional, Pattern, Type

from .adapters import (
    AviationStackAdapter,
    CarrierAdapter,
    CoscoAdapter,
    DHLAdapter,
    FedExAdapter,
    MaerskAdapter,
    MarineTrafficAdapter,
    MSCAdapter,
    UPSAdapter,
    VizionAdapter,
)
from .classifier import FLIGHT_NUMBER_PATTERN, MMSI_PATTERN, classify as classify_identifier
from .exceptions import UnknownProviderHint

MODALITY_GROUND = "ground"
MODALITY_MARITIME = "maritime"
MODALITY_AVIATION = "aviation"
MODALITIES = (MODALITY_AVIATION, MODALITY_MARITIME, MODALITY_GROUND)

DEFAULT_HTTP_TIMEOUT = 8.0


@dataclass(frozen=True)
class Provider:
    """외부 트래킹 시스템 하나. 패턴이 None 이면 힌트로만 선택 가능."""

    name: str
    pattern: Optional[Pattern[str]]
    endpoint: str
    credential: str = ""
    modality: str = MODALITY_GROUND
    category: str = ""
    adapter: Type[CarrierAdapter] = CarrierAdapter
    timeout: float = DEFAULT_HTTP_TIMEOUT

    @property
    def is_configured(self) -> bool:
        return bool(self.credential)

    def matches(self, identifier: str) -> bool:
        return bool(self.pattern is not None and self.pattern.match(identifier))

    def build_adapter(self) -> CarrierAdapter:
        return self.adapter()


def _norm(name: str) -> str:
    return (name or "").strip().lower().replace("-", "").replace("_", "").replace(" ", "")


# 흔한 별칭 → 표준 이름(정규화 키)
_ALIASES = {
    "maerskline": "maersk",
    "coscoshipping": "cosco",
    "mediterraneanshipping": "msc",
    "dhlexpress": "dhl",
    "unitedparcelservice": "ups",
    "ais": "marinetraffic",
}


class ProviderRegistry:
    """
    등록 순서를 보존하는 제공자 목록.
    프로세스 시작 시 한 번 만들어 TrackingService 에 주입한다.
    """

    def __init__(self, providers: Iterable[Provider] = ()):
        self._providers: List[Provider] = []
        for provider in providers:
            self.register(provider)

    def register(self, provider: Provider) -> None:
        if self._find(provider.name) is not None:
            raise ValueError(f"Provider '{provider.name}' is already registered")
        self._providers.append(provider)

    def _find(self, name: str) -> Optional[Provider]:
        key = _norm(name)
        key = _ALIASES.get(key, key)
        for provider in self._providers:
            if _norm(provider.name) == key:
                return provider
        return None

    def get(self, name: str) -> Provider:
        """이름/별칭으로 제공자 조회 (대소문자 무시). 없으면 UnknownProviderHint."""
        provider = self._find(name)
        if provider is None:
            raise UnknownProviderHint(f"Unknown tracking provider '{name}'", provider=name or "")
        return provider

    def classify(self, identifier: str, modality: Optional[str] = None) -> Optional[Provider]:
        return classify_identifier(identifier, self, modality=modality)

    def for_modality(self, modality: Optional[str] = None) -> List[Provider]:
        if not modality:
            return list(self._providers)
        return [p for p in self._providers if p.modality == modality]

    def status(self) -> Dict[str, bool]:
        return {p.name: p.is_configured for p in self._providers}

    def __iter__(self) -> Iterator[Provider]:
        return iter(self._providers)

    def __len__(self) -> int:
        return len(self._providers)


# 기본 제공자 표. 순서가 곧 분류 우선순위.
# (name, pattern, modality, category, adapter, default endpoint)
DEFAULT_PROVIDERS = (
    ("Maersk", re.compile(r"^[A-Z]{4}\d{7}$"), MODALITY_GROUND, "ocean_carrier",
     MaerskAdapter, "https://api.maersk.com/track/v1/tracking"),
    ("COSCO", re.compile(r"^[A-Z]{4}\d{10}$"), MODALITY_GROUND, "ocean_carrier",
     CoscoAdapter, "https://api.cosco-shipping.com/tracking/v1"),
    ("FedEx", re.compile(r"^\d{12}$"), MODALITY_GROUND, "parcel_carrier",
     FedExAdapter, "https://api.fedex.com/track/v1/trackingnumbers"),
    ("UPS", re.compile(r"^1Z[0-9A-Z]{16}$"), MODALITY_GROUND, "parcel_carrier",
     UPSAdapter, "https://onlinetools.ups.com/track/v1/details"),
    ("DHL", re.compile(r"^\d{10,11}$"), MODALITY_GROUND, "parcel_carrier",
     DHLAdapter, "https://api-eu.dhl.com/track/shipments"),
    ("MSC", re.compile(r"^[A-Z]{4}\d{6,7}$"), MODALITY_GROUND, "ocean_carrier",
     MSCAdapter, "https://api.msc.com/tracking/v1"),
    ("Vizion", None, MODALITY_GROUND, "container_platform",
     VizionAdapter, "https://api.vizionapi.com/v1"),
    ("AviationStack", FLIGHT_NUMBER_PATTERN, MODALITY_AVIATION, "flight_data",
     AviationStackAdapter, "http://api.aviationstack.com/v1"),
    ("MarineTraffic", MMSI_PATTERN, MODALITY_MARITIME, "vessel_position",
     MarineTrafficAdapter, "https://services.marinetraffic.com/api"),
)


def build_default_registry(config: Optional[Dict[str, Any]] = None) -> ProviderRegistry:
    """
    settings.TRACKING 형태의 dict 로부터 레지스트리 생성.
    config 예:
    {
      "HTTP_TIMEOUT": 8,
      "PROVIDERS": {"Maersk": {"credential": "...", "endpoint": ""}, ...}
    }
    """
    config = config or {}
    timeout = float(config.get("HTTP_TIMEOUT") or DEFAULT_HTTP_TIMEOUT)
    overrides = config.get("PROVIDERS") or {}

    registry = ProviderRegistry()
    for name, pattern, modality, category, adapter, endpoint in DEFAULT_PROVIDERS:
        opts = overrides.get(name) or {}
        registry.register(
            Provider(
                name=name,
                pattern=pattern,
                endpoint=(opts.get("endpoint") or endpoint).rstrip("/"),
                credential=(opts.get("credential") or "").strip(),
                modality=modality,
                category=category,
                adapter=adapter,
                timeout=timeout,
            )
        )
    return registry
