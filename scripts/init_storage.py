from __future__ import annotations

import argparse
import sys

from s3upload.application.upload_workflow import UploadWorkflow
from s3upload.domain.upload import UploadError
from s3upload.infrastructure.object_storage import S3ObjectStoreClient


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("bucket")
    args = parser.parse_args()

    workflow = UploadWorkflow(S3ObjectStoreClient.from_settings())
    try:
        workflow.ensure_bucket(args.bucket)
    except UploadError as exc:
        print(exc, file=sys.stderr)
        sys.exit(1)
    print(f"bucket-ready:{args.bucket}")
