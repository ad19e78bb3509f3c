# services/dataset_parser.py
import csv
import io
from typing import Dict, List

from services.errors import ParseError


def parse_csv(raw_text: str) -> List[Dict[str, str]]:
    """
    첫 줄을 헤더로 보고 나머지 줄을 {헤더: 값} 으로 변환.
    - 값은 문자열 그대로 (타입 변환 없음)
    - 빈 줄은 건너뜀
    - 컬럼 수가 헤더와 다른 줄이 하나라도 있으면 파일 전체를 ParseError 로 실패 (strict)
    """
    reader = csv.DictReader(io.StringIO(raw_text, newline=""))
    try:
        header = reader.fieldnames
        if not header:
            raise ParseError("CSV header is missing", {"row": 1, "message": "empty file"})

        rows: List[Dict[str, str]] = []
        for row in reader:
            extra = row.pop(None, None)
            if extra is not None or any(v is None for v in row.values()):
                got = len(header) + len(extra or []) - sum(1 for v in row.values() if v is None)
                raise ParseError(
                    "Column count mismatch",
                    {
                        "row": reader.line_num,
                        "expected": len(header),
                        "got": got,
                        "message": f"Row {reader.line_num} has {got} fields, expected {len(header)}",
                    },
                )
            rows.append(row)
        return rows
    except csv.Error as e:
        raise ParseError("Malformed CSV", {"row": reader.line_num, "message": str(e)}) from e
