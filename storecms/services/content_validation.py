# storecms/services/content_validation.py
# Shape check for block documents: {"version": 1, "blocks": [{id, type, data, settings?}]}
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from storecms.core.errors import ContentValidationError

CONTENT_JSON_VERSION = 1

# Unknown types only produce a warning: new block types ship in the builder
# before this list is updated.
KNOWN_BLOCK_TYPES = frozenset({
    "hero",
    "richText",
    "image",
    "imageGrid",
    "featureList",
    "testimonials",
    "faq",
    "callToAction",
    "productGrid",
    "productHighlight",
    "trustBar",
    "comparisonTable",
    "benefitStack",
    "scienceExplainer",
    "protocolBuilder",
    "recoveryUseCases",
    "safetyChecklist",
    "guaranteeAndWarranty",
    "deliveryAndSetup",
    "financingAndPayment",
    "objectionBusters",
    "beforeAfterExpectations",
    "pressMentions",
    "socialProofStats",
    "sectionRef",
    "blogFeaturedPost",
    "blogPostFeed",
    "spacer",
    "divider",
    "header",
    "footer",
    "banner",
    "video",
    "html",
})


@dataclass
class ContentValidationResult:
    document: Dict[str, Any]
    warnings: List[str] = field(default_factory=list)


def empty_document() -> Dict[str, Any]:
    return {"version": CONTENT_JSON_VERSION, "blocks": []}


def _is_non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def validate_content_json(raw: Any) -> ContentValidationResult:
    """
    Validate a contentJson value and return the normalized document.

    - None normalizes to an empty version-1 document.
    - A missing "version" normalizes to 1.
    - Structural problems raise ContentValidationError naming the block index.
    - Unknown block types are reported in ``warnings`` and kept.

    The input is never mutated.
    """
    if raw is None:
        return ContentValidationResult(document=empty_document())

    if not isinstance(raw, dict):
        raise ContentValidationError("contentJson must be a JSON object, not an array or primitive")

    blocks = raw.get("blocks")
    if not isinstance(blocks, list):
        raise ContentValidationError("contentJson.blocks must be an array")

    warnings: List[str] = []
    seen_ids: Dict[str, int] = {}

    for i, block in enumerate(blocks):
        if not isinstance(block, dict):
            raise ContentValidationError(f"contentJson.blocks[{i}] must be a JSON object")

        block_id = block.get("id")
        if not _is_non_empty_str(block_id):
            raise ContentValidationError(f"contentJson.blocks[{i}].id must be a non-empty string")

        block_type = block.get("type")
        if not _is_non_empty_str(block_type):
            raise ContentValidationError(f"contentJson.blocks[{i}].type must be a non-empty string")

        if "data" in block and not isinstance(block["data"], dict):
            raise ContentValidationError(f"contentJson.blocks[{i}].data must be a JSON object")

        if "settings" in block and block["settings"] is not None and not isinstance(block["settings"], dict):
            raise ContentValidationError(f"contentJson.blocks[{i}].settings must be a JSON object")

        if block_id in seen_ids:
            raise ContentValidationError(
                f'contentJson.blocks[{i}].id duplicates blocks[{seen_ids[block_id]}].id ("{block_id}")'
            )
        seen_ids[block_id] = i

        if block_type not in KNOWN_BLOCK_TYPES:
            warnings.append(f'Unknown block type "{block_type}" at blocks[{i}]')

    document = dict(raw)
    document["blocks"] = list(blocks)
    if document.get("version") is None:
        document["version"] = CONTENT_JSON_VERSION

    return ContentValidationResult(document=document, warnings=warnings)
