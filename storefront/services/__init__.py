# storefront/services/__init__.py
import math
from typing import Any, Dict, List


def page_of(rows: List[Any], page: int, page_size: int, total: int) -> Dict[str, Any]:
    return {
        "data": rows,
        "pagination": {
            "page": page,
            "page_size": page_size,
            "total": total,
            "total_pages": math.ceil(total / page_size) if page_size else 0,
        },
    }
