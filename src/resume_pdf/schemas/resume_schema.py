"""JSON schema (draft-07) for resume input documents."""

_DATE = {"type": "string", "format": "date"}
_URI = {"type": "string", "format": "uri"}
_STRING = {"type": "string"}
_STRING_LIST = {"type": "array", "items": _STRING}


def _array_of(properties: dict, required: list[str] | None = None) -> dict:
    item: dict = {"type": "object", "properties": properties}
    if required:
        item["required"] = required
    return {"type": "array", "items": item}


RESUME_SCHEMA: dict = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "required": ["basics", "work"],
    "properties": {
        "basics": {
            "type": "object",
            "required": ["name", "email"],
            "properties": {
                "name": {"type": "string", "minLength": 1},
                "label": _STRING,
                "email": {"type": "string", "format": "email"},
                "phone": _STRING,
                "url": _URI,
                "summary": _STRING,
                "location": {
                    "type": "object",
                    "properties": {
                        "address": _STRING,
                        "postalCode": _STRING,
                        "city": _STRING,
                        "countryCode": _STRING,
                        "region": _STRING,
                    },
                },
                "profiles": _array_of(
                    {"network": _STRING, "username": _STRING, "url": _URI}
                ),
            },
        },
        "work": _array_of(
            {
                "name": {"type": "string", "minLength": 1},
                "position": {"type": "string", "minLength": 1},
                "url": _URI,
                "startDate": _DATE,
                "endDate": _DATE,
                "summary": _STRING,
                "highlights": _STRING_LIST,
                "location": _STRING,
            },
            required=["name", "position", "startDate"],
        ),
        "education": _array_of(
            {
                "institution": _STRING,
                "area": _STRING,
                "studyType": _STRING,
                "startDate": _DATE,
                "endDate": _DATE,
                "location": _STRING,
                "gpa": _STRING,
                "courses": _STRING_LIST,
            }
        ),
        "skills": _array_of(
            {"name": _STRING, "level": _STRING, "keywords": _STRING_LIST}
        ),
        "projects": _array_of(
            {
                "name": _STRING,
                "description": _STRING,
                "highlights": _STRING_LIST,
                "keywords": _STRING_LIST,
                "startDate": _DATE,
                "endDate": _DATE,
                "url": _URI,
            }
        ),
        "awards": _array_of(
            {"title": _STRING, "date": _DATE, "awarder": _STRING, "summary": _STRING}
        ),
        "certifications": _array_of(
            {"name": _STRING, "date": _DATE, "issuer": _STRING, "url": _URI}
        ),
        "publications": _array_of(
            {
                "name": _STRING,
                "publisher": _STRING,
                "releaseDate": _DATE,
                "url": _URI,
                "summary": _STRING,
            }
        ),
        "languages": _array_of({"language": _STRING, "fluency": _STRING}),
        "interests": _array_of({"name": _STRING, "keywords": _STRING_LIST}),
        "references": _array_of({"name": _STRING, "reference": _STRING}),
    },
}
