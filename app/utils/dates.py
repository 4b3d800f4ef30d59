from datetime import datetime, timezone

def get_now() -> datetime:
    """Retorna el timestamp actual en UTC con información de zona horaria."""
    return datetime.now(timezone.utc)

def to_epoch_ms(value: datetime) -> int:
    """Convierte un datetime a milisegundos desde epoch (formato que usan los clientes JS)."""
    return int(value.timestamp() * 1000)
