import copy

import pytest

from stackshape.engine.template import Template

BUCKET_TEMPLATE = {
    "Parameters": {
        "Name": {
            "Type": "String",
        },
    },
    "Resources": {
        "Bucket": {
            "Type": "AWS::S3::Bucket",
            "Properties": {
                "BucketName": {
                    "Ref": "Name",
                },
            },
        },
    },
    "Outputs": {
        "BucketArn": {
            "Value": {
                "Fn::GetAtt": [
                    "Bucket",
                    "Arn",
                ],
            },
        },
    },
}


@pytest.fixture
def bucket_template_value() -> dict:
    return copy.deepcopy(BUCKET_TEMPLATE)


@pytest.fixture
def bucket_template(bucket_template_value) -> Template:
    return Template.from_value(bucket_template_value)
