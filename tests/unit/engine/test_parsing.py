import json

import pytest

from stackshape.engine.exceptions import EncodingError
from stackshape.engine.graph import Element
from stackshape.engine.parsing import load_template, parse_template, template_to_json, template_to_yaml

YAML_TEMPLATE = """
Parameters:
  Name:
    Type: String
Resources:
  Bucket:
    Type: AWS::S3::Bucket
    Properties:
      BucketName: !Ref Name
      Tags:
        - Key: Created
          Value: 2020-01-01
Outputs:
  BucketArn:
    Value: !GetAtt Bucket.Arn
  Url:
    Value: !Sub "https://${Bucket}.s3.${AWS::URLSuffix}"
  Joined:
    Value: !Join ["-", [!Ref Name, "suffix"]]
  Selected:
    Value: !Select
      - 0
      - !GetAZs ""
"""


class TestParseTemplate:
    def test_short_form_intrinsics(self):
        template = parse_template(YAML_TEMPLATE)

        bucket = template["Resources"]["Bucket"]
        outputs = template["Outputs"]
        assert bucket["Properties"]["BucketName"] == {"Ref": "Name"}
        assert outputs["BucketArn"]["Value"] == {"Fn::GetAtt": ["Bucket", "Arn"]}
        assert outputs["Url"]["Value"] == {"Fn::Sub": "https://${Bucket}.s3.${AWS::URLSuffix}"}
        assert outputs["Joined"]["Value"] == {"Fn::Join": ["-", [{"Ref": "Name"}, "suffix"]]}
        assert outputs["Selected"]["Value"] == {"Fn::Select": [0, {"Fn::GetAZs": ""}]}

    def test_dates_are_strings(self):
        template = parse_template(YAML_TEMPLATE)
        assert template["Resources"]["Bucket"]["Properties"]["Tags"][0]["Value"] == "2020-01-01"

    def test_condition_tag(self):
        template = parse_template("Resources:\n  Topic:\n    Value: !Condition IsProd\n")
        assert template["Resources"]["Topic"]["Value"] == {"Condition": "IsProd"}

    def test_json(self):
        value = {"Resources": {"Topic": {"Type": "AWS::SNS::Topic"}}}
        assert parse_template(json.dumps(value)) == value

    def test_empty(self):
        assert parse_template("") == {}

    @pytest.mark.parametrize("text", ["Resources: [1", "- a\n- b\n", "just a string"])
    def test_invalid(self, text):
        with pytest.raises(EncodingError):
            parse_template(text)


class TestLoadTemplate:
    def test_key_order_is_preserved(self):
        template = load_template(YAML_TEMPLATE)

        assert template.root.keys() == ["Parameters", "Resources", "Outputs"]
        assert template.get(["Resources", "Bucket"]).keys() == ["Type", "Properties"]

    def test_graph(self):
        graph = load_template(YAML_TEMPLATE).graph()

        assert graph.get(Element("Url", "Outputs")) == [
            Element("AWS::URLSuffix", "PseudoParameters"),
            Element("Bucket", "Resources"),
        ]
        assert graph.get(Element("Bucket", "Resources")) == [Element("Name", "Parameters")]

    def test_dump_round_trip(self):
        template = load_template(YAML_TEMPLATE)

        assert load_template(template_to_yaml(template)) == template
        assert load_template(template_to_json(template)) == template

    def test_dump_keeps_order(self):
        template = load_template(YAML_TEMPLATE)
        dumped = template_to_yaml(template)

        assert dumped.index("Parameters:") < dumped.index("Resources:") < dumped.index("Outputs:")
