"""
aws_cloudwatch_log_data_protection_policy_document data source.

Builds the JSON policy document from configuration alone; no API call is
made. The document ID is a hash of the rendered JSON.
"""
from typing import Any, Dict, List, Mapping

from blockmap.attrs import as_mapping, as_sequence, as_string, set_to_list, unwrap
from blockmap.config import Settings
from blockmap.encoding import serialize, string_hashcode
from blockmap.errors import SemanticInvariantViolation, StructuralMismatch
from blockmap.models.policy import (
    DEFAULT_POLICY_VERSION,
    Audit,
    CloudWatchLogsDestination,
    Configuration,
    CustomDataIdentifier,
    Deidentify,
    FindingsDestination,
    FirehoseDestination,
    MaskConfig,
    Operation,
    PolicyDocument,
    S3Destination,
    Statement,
)
from blockmap.schema import (
    ValueType,
    block,
    length_between,
    nested,
    not_empty,
    set_of,
    string,
)
from blockmap.state import ResourceData

TYPE_NAME = "aws_cloudwatch_log_data_protection_policy_document"

FIRST_STATEMENT_RULE = "the first policy statement must contain only the audit operation"
SECOND_STATEMENT_RULE = "the second policy statement must contain only the deidentify operation"

_FINDINGS_DESTINATION = block(
    cloudwatch_logs=nested(block(log_group=string(not_empty, required=True)), max_items=1),
    firehose=nested(block(delivery_stream=string(not_empty, required=True)), max_items=1),
    s3=nested(block(bucket=string(not_empty, required=True)), max_items=1),
)

_OPERATION = block(
    audit=nested(
        block(findings_destination=nested(_FINDINGS_DESTINATION, required=True, max_items=1)),
        max_items=1,
    ),
    deidentify=nested(
        block(mask_config=nested(block(), required=True, max_items=1)),
        max_items=1,
    ),
)

SCHEMA = block(
    configuration=nested(
        block(
            custom_data_identifier=nested(
                block(
                    name=string(not_empty, length_between(1, 128), required=True),
                    regex=string(not_empty, length_between(1, 200), required=True),
                ),
                max_items=10,
            ),
        ),
        max_items=1,
    ),
    description=string(),
    json=string(computed=True),
    name=string(not_empty, required=True),
    statement=nested(
        block(
            data_identifiers=set_of(ValueType.STRING, required=True, min_items=1),
            operation=nested(_OPERATION, required=True, max_items=1),
            sid=string(),
        ),
        required=True,
        min_items=2,
        max_items=2,
    ),
    version=string(default=DEFAULT_POLICY_VERSION),
)


def _expand_custom_data_identifiers(node: Any) -> List[CustomDataIdentifier]:
    identifiers: List[CustomDataIdentifier] = []
    items, _ = as_sequence(node)
    for raw in items:
        m, ok = as_mapping(raw)
        if not ok:
            continue
        name, name_ok = as_string(m.get("name"))
        regex, regex_ok = as_string(m.get("regex"))
        if not (name_ok and regex_ok):
            continue
        identifiers.append(CustomDataIdentifier(name=name, regex=regex))
    return identifiers


def _expand_findings_destination(m: Mapping[str, Any]) -> FindingsDestination:
    destination = FindingsDestination()

    cwl, ok = unwrap(m.get("cloudwatch_logs"))
    if ok:
        destination.cloudwatch_logs = CloudWatchLogsDestination(
            log_group=as_string(cwl.get("log_group"))[0]
        )

    firehose, ok = unwrap(m.get("firehose"))
    if ok:
        destination.firehose = FirehoseDestination(
            delivery_stream=as_string(firehose.get("delivery_stream"))[0]
        )

    s3, ok = unwrap(m.get("s3"))
    if ok:
        destination.s3 = S3Destination(bucket=as_string(s3.get("bucket"))[0])

    return destination


def _expand_operation(m: Mapping[str, Any]) -> Operation:
    operation = Operation()

    audit_map, ok = unwrap(m.get("audit"))
    if ok:
        operation.audit = Audit()
        fd, ok = unwrap(audit_map.get("findings_destination"))
        if ok:
            operation.audit.findings_destination = _expand_findings_destination(fd)

    deidentify_map, ok = unwrap(m.get("deidentify"))
    if ok:
        operation.deidentify = Deidentify()
        # mask_config has no fields; its presence is what matters.
        _, ok = unwrap(deidentify_map.get("mask_config"))
        if ok:
            operation.deidentify.mask_config = MaskConfig()

    return operation


def _expand_statement(m: Mapping[str, Any]) -> Statement:
    statement = Statement()

    sid, ok = as_string(m.get("sid"))
    if ok and sid:
        statement.sid = sid

    statement.data_identifiers = set_to_list(m.get("data_identifiers"))

    op, ok = unwrap(m.get("operation"))
    if ok:
        statement.operation = _expand_operation(op)

    return statement


def expand_document(tree: Mapping[str, Any]) -> PolicyDocument:
    """Map a decoded policy document block onto a PolicyDocument."""
    document = PolicyDocument(
        description=as_string(tree.get("description"))[0],
        name=as_string(tree.get("name"))[0],
        version=as_string(tree.get("version"))[0],
    )

    conf, ok = unwrap(tree.get("configuration"))
    if ok:
        document.configuration = Configuration(
            custom_data_identifiers=_expand_custom_data_identifiers(conf.get("custom_data_identifier"))
        )

    statements, _ = as_sequence(tree.get("statement"))
    for raw in statements:
        m, ok = as_mapping(raw)
        if not ok:
            continue
        document.statements.append(_expand_statement(m))

    return document


def validate_document(document: PolicyDocument) -> None:
    """Enforce the audit-then-deidentify statement layout."""
    if len(document.statements) != 2:
        raise StructuralMismatch(
            f"a data protection policy requires exactly 2 statements, got {len(document.statements)}"
        )

    first = document.statements[0].operation
    if first is None or first.audit is None or first.deidentify is not None:
        raise SemanticInvariantViolation(FIRST_STATEMENT_RULE)

    second = document.statements[1].operation
    if second is None or second.audit is not None or second.deidentify is None:
        raise SemanticInvariantViolation(SECOND_STATEMENT_RULE)


def render(tree: Mapping[str, Any], indent: int = 2) -> Dict[str, str]:
    """Expand, validate and serialize; returns the ``json`` text and ``id``."""
    document = expand_document(tree)
    validate_document(document)
    text = serialize(document, indent=indent)
    return {"json": text, "id": str(string_hashcode(text))}


def read(data: ResourceData, client: Any, settings: Settings) -> None:
    tree = {name: data.get(name) for name in SCHEMA.attributes if not SCHEMA[name].computed_only}
    rendered = render(tree, indent=settings.indent)
    data.set("json", rendered["json"])
    data.set_id(rendered["id"])
