"""An interface used in place of its concrete class."""
from abc import ABC, abstractmethod
from dataclasses import dataclass


class IShipper(ABC):
    ShipperID: int

    @abstractmethod
    def tracking_url(self, code: str) -> str:
        ...


@dataclass
class Shipper(IShipper):
    ShipperID: int
    CompanyName: str = ""

    def tracking_url(self, code: str) -> str:
        return f"https://track.example.com/{self.ShipperID}/{code}"


@dataclass
class Shipment:
    ShipmentID: int
    ShipperID: int
    Shipper: IShipper
