# domains/tracking/adapters/__init__.py
from .aviation import AviationStackAdapter
from .base import CarrierAdapter
from .maritime import MarineTrafficAdapter
from .ocean import CoscoAdapter, MaerskAdapter, MSCAdapter
from .parcel import DHLAdapter, FedExAdapter, UPSAdapter
from .vizion import VizionAdapter

__all__ = [
    "CarrierAdapter",
    "MaerskAdapter",
    "CoscoAdapter",
    "MSCAdapter",
    "FedExAdapter",
    "UPSAdapter",
    "DHLAdapter",
    "VizionAdapter",
    "AviationStackAdapter",
    "MarineTrafficAdapter",
]
