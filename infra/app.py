#!/usr/bin/env python3
"""CDK App for the FastData IoT pipeline handlers."""

import aws_cdk as cdk

from stacks import FastDataStack

app = cdk.App()

env = cdk.Environment(
    account=app.node.try_get_context("account") or None,
    region=app.node.try_get_context("region") or "us-east-1",
)

prj_name = app.node.try_get_context("prj_name") or "fastdata"

# Kinesis -> queuing Lambda -> SNS -> SQS -> dequeuing Lambda
FastDataStack(
    app,
    "FastDataStack",
    prj_name=prj_name,
    firehose_stream_name=app.node.try_get_context("firehose_stream_name"),
    env=env,
)

app.synth()
