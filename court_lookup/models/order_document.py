"""OrderDocument data model for the court lookup engine."""

from dataclasses import asdict, dataclass

ORDER_TYPES = ("judgment", "order", "interim_order", "final_order", "document")


@dataclass
class OrderDocument:
    """One downloadable order or judgment tied to a case.

    Attributes:
        title: Display title of the document
        url: Absolute download URL
        date: Date as printed on the site (not normalized)
        type: One of ORDER_TYPES
        case_number: Case number printed next to the document
        petitioner: Petitioner printed next to the document
        respondent: Respondent printed next to the document
    """

    title: str
    url: str
    date: str = ""
    type: str = "document"
    case_number: str = ""
    petitioner: str = ""
    respondent: str = ""

    def __post_init__(self) -> None:
        """Validate the document data after initialization."""
        self._validate()

    def _validate(self) -> None:
        if not self.url or not self.url.startswith(("http://", "https://")):
            raise ValueError(f"Document URL must be absolute, got: {self.url!r}")

        if self.type not in ORDER_TYPES:
            raise ValueError(f"Unknown document type: {self.type!r}")

    @classmethod
    def from_dict(cls, data: dict) -> "OrderDocument":
        return cls(
            title=data.get("title", ""),
            url=data["url"],
            date=data.get("date", ""),
            type=data.get("type", "document"),
            case_number=data.get("case_number", ""),
            petitioner=data.get("petitioner", ""),
            respondent=data.get("respondent", ""),
        )

    def to_dict(self) -> dict:
        """Convert order document to dictionary for JSON export."""
        return asdict(self)
