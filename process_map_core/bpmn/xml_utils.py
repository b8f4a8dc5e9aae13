"""
Utilidades de XML para el export BPMN: escape de texto e ids de elementos.
"""

from __future__ import annotations

import re
from typing import Tuple

# Orden importa: "&" primero, para no re-escapar las entidades que generan
# los reemplazos siguientes.
_ESCAPES: Tuple[Tuple[str, str], ...] = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&apos;"),
)

# Caracteres que XML 1.0 no admite ni siquiera como referencia numérica.
_ILLEGAL_XML_CHARS = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ufffe\uffff]")
REPLACEMENT_CHAR = "\ufffd"

_NON_ID_CHARS = re.compile(r"[^A-Za-z0-9_.\-]")


def escape_xml(text: str) -> str:
    """
    Escapa los cinco caracteres reservados de XML.

    Los caracteres de control inválidos en XML 1.0 se reemplazan por U+FFFD:
    el contenido se escapa, nunca se rechaza.
    """
    if not text:
        return ""
    text = _ILLEGAL_XML_CHARS.sub(REPLACEMENT_CHAR, str(text))
    for raw, entity in _ESCAPES:
        text = text.replace(raw, entity)
    return text


def unescape_xml(text: str) -> str:
    """Inversa de `escape_xml` para las cinco entidades ("&amp;" al final)."""
    if not text:
        return ""
    for raw, entity in reversed(_ESCAPES):
        text = text.replace(entity, raw)
    return text


def sanitize_id_fragment(value: object) -> str:
    """
    Convierte una clave externa en un fragmento válido para un id XML.

    Todo carácter fuera de [A-Za-z0-9_.-] pasa a "_". Es una función pura:
    la misma clave produce siempre el mismo fragmento.
    """
    fragment = _NON_ID_CHARS.sub("_", str(value).strip())
    return fragment or "_"


def element_id(role: str, key: str) -> str:
    """Id de elemento = prefijo de rol + clave ("Task_W001")."""
    return f"{role}_{key}"


def flow_id(source_id: str, target_id: str) -> str:
    return f"Flow_{source_id}_{target_id}"
