import json
import logging

import yaml

from stackshape.engine.exceptions import EncodingError
from stackshape.engine.template import Template

LOG = logging.getLogger(__name__)

# short-form tags whose long form is not "Fn::<name>"
SHORT_FORM_KEYS = {
    "Ref": "Ref",
    "Condition": "Condition",
}


class TemplateLoader(yaml.SafeLoader):
    """Safe YAML loader that parses date strings as strings, not date objects, and expands short-form intrinsics."""


TemplateLoader.yaml_implicit_resolvers = {
    k: [r for r in v if r[0] != "tag:yaml.org,2002:timestamp"]
    for k, v in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def construct_intrinsic(loader: yaml.SafeLoader, tag_suffix: str, node: yaml.Node) -> dict:
    """Converts a short-form intrinsic like ``!GetAtt Bucket.Arn`` into ``{"Fn::GetAtt": ["Bucket", "Arn"]}``."""
    key = SHORT_FORM_KEYS.get(tag_suffix, f"Fn::{tag_suffix}")
    if isinstance(node, yaml.ScalarNode):
        value = loader.construct_scalar(node)
        if tag_suffix == "GetAtt" and "." in value:
            value = value.split(".", 1)
    elif isinstance(node, yaml.SequenceNode):
        value = loader.construct_sequence(node, deep=True)
    else:
        value = loader.construct_mapping(node, deep=True)
    return {key: value}


TemplateLoader.add_multi_constructor("!", construct_intrinsic)


def parse_template(template: str) -> dict:
    """
    Parses template text, trying JSON first and YAML second.

    :raises EncodingError: if the text cannot be parsed or does not contain a mapping
    """
    try:
        parsed = json.loads(template)
    except ValueError:
        LOG.debug("Template is not valid JSON, parsing it as YAML")
        try:
            parsed = yaml.load(template, Loader=TemplateLoader)
        except yaml.YAMLError as e:
            raise EncodingError(f"Unable to parse template: {e}") from e

    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise EncodingError(f"Template must be a mapping, not a {type(parsed).__name__}")
    return parsed


def load_template(template: str) -> Template:
    return Template.from_value(parse_template(template))


def template_to_json(template: Template) -> str:
    return json.dumps(template.to_value(), indent=2)


def template_to_yaml(template: Template) -> str:
    return yaml.safe_dump(template.to_value(), sort_keys=False, default_flow_style=False)
