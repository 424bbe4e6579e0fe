from decimal import Decimal

from collectdesk import db
from collectdesk.utils import parse_money


class Settings(db.Model):
    """Application settings stored in the database."""

    __tablename__ = "settings"

    SERVICE_PRICE = "service_price"
    COMMISSION_AMOUNT = "commission_amount"

    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(100), unique=True, nullable=False, index=True)
    value = db.Column(db.Text)
    updated_at = db.Column(db.DateTime, server_default=db.func.now(), onupdate=db.func.now())

    @classmethod
    def get(cls, key: str, default: str = None) -> str:
        """Get a setting value by key."""
        setting = cls.query.filter_by(key=key).first()
        return setting.value if setting else default

    @classmethod
    def set(cls, key: str, value: str, commit: bool = True) -> None:
        """Set a setting value.

        Pass ``commit=False`` to stage several keys and commit them together.
        """
        setting = cls.query.filter_by(key=key).first()
        if setting:
            setting.value = value
            setting.updated_at = db.func.now()
        else:
            setting = cls(key=key, value=value)
            db.session.add(setting)
        if commit:
            db.session.commit()

    # ------------------------------------------------------------------
    # Pricing
    # ------------------------------------------------------------------

    @classmethod
    def _get_money(cls, key: str) -> Decimal:
        amount = parse_money(cls.get(key))
        return amount if amount is not None else Decimal("0.00")

    @classmethod
    def get_service_price(cls) -> Decimal:
        """Price charged per submission."""
        return cls._get_money(cls.SERVICE_PRICE)

    @classmethod
    def get_commission_amount(cls) -> Decimal:
        """Commission paid to the collector per submission."""
        return cls._get_money(cls.COMMISSION_AMOUNT)

    @classmethod
    def get_pricing(cls) -> dict:
        """Return the current pricing as Decimals, read live."""
        return {
            "service_price": cls.get_service_price(),
            "commission_amount": cls.get_commission_amount(),
        }

    @classmethod
    def save_pricing(cls, service_price: Decimal, commission_amount: Decimal) -> None:
        """Persist both pricing keys in a single commit.

        Callers validate the values; see ``PricingService.update``.
        """
        cls.set(cls.SERVICE_PRICE, str(service_price), commit=False)
        cls.set(cls.COMMISSION_AMOUNT, str(commission_amount), commit=False)
        db.session.commit()

    def __repr__(self):
        return f"<Settings {self.key}={self.value}>"
