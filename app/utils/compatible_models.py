"""
Modelos de vehículo compatibles

Un producto guarda sus modelos compatibles como lista separada por comas
("MODEL_3,MODEL_Y") tomada de un conjunto cerrado.
"""
from enum import Enum
from typing import Iterable, List, Optional, Union


class VehicleModel(str, Enum):
    """Modelos Tesla soportados"""
    MODEL_3 = "MODEL_3"
    MODEL_Y = "MODEL_Y"
    MODEL_S = "MODEL_S"
    MODEL_X = "MODEL_X"


MODEL_ORDER = list(VehicleModel)


def normalize_model(tag: str) -> VehicleModel:
    """Normalizar un tag ("Model Y", "model_y", "MODEL_Y") al enum"""
    key = str(tag).strip().upper().replace(" ", "_").replace("-", "_")
    try:
        return VehicleModel(key)
    except ValueError:
        allowed = ", ".join(m.value for m in MODEL_ORDER)
        raise ValueError(f"Unknown vehicle model '{tag}'. Allowed: {allowed}") from None


def parse_models(value: Union[str, Iterable[str], None]) -> List[VehicleModel]:
    """Convertir texto separado por comas o lista en modelos únicos ordenados"""
    if value is None:
        return []
    if isinstance(value, str):
        parts = value.split(",")
    else:
        parts = list(value)
    found = {normalize_model(p) for p in parts if str(p).strip()}
    return [m for m in MODEL_ORDER if m in found]


def encode_models(value: Union[str, Iterable[str], None]) -> Optional[str]:
    """Codificación canónica para persistir; ``None`` si está vacío"""
    models = parse_models(value)
    if not models:
        return None
    return ",".join(m.value for m in models)


def model_label(tag: Union[str, VehicleModel]) -> str:
    """MODEL_3 -> Model 3"""
    model = normalize_model(tag.value if isinstance(tag, VehicleModel) else tag)
    return model.value.replace("MODEL_", "Model ").replace("_", " ")
