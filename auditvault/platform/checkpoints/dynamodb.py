"""DynamoDB checkpoint store.

Table layout:
    EventDate (S, hash key)   calendar day the checkpoint was created
    CreatedAt (S, range key)  fixed-width UTC ISO 8601 timestamp
    From, To  (S)             exported window bounds

The latest checkpoint is found by sorting CreatedAt as text, which only matches time order
while every item in a partition uses the same format. Older exporters wrote second
precision RFC 3339 in the local zone (e.g. 2024-05-01T12:00:03+02:00). Do not mix those
items into a partition this store writes to: let the day roll over, or use a new table.
"""

from typing import Dict, Optional

import aioboto3
from botocore.exceptions import BotoCoreError, ClientError

from auditvault.core.logging import ContextualLogger
from auditvault.platform.checkpoints._base import BaseCheckpointStore
from auditvault.platform.export.exceptions import (
    CheckpointCommitError,
    CheckpointConflictError,
    CheckpointLookupError,
)
from auditvault.schemas.checkpoint import Checkpoint


class DynamoDBCheckpointStore(BaseCheckpointStore):
    """Checkpoint store backed by a DynamoDB table."""

    def __init__(
        self,
        table_name: str,
        session: Optional[aioboto3.Session] = None,
        region: str = "us-east-1",
        endpoint_url: Optional[str] = None,
        logger: Optional[ContextualLogger] = None,
    ):
        """Initialize the store.

        Args:
            table_name: Bookmark table name
            session: aioboto3 session (a new one is created if omitted)
            region: AWS region
            endpoint_url: Optional endpoint override (LocalStack)
            logger: Contextual logger
        """
        super().__init__()
        self.table_name = table_name
        self.session = session or aioboto3.Session()
        self._region = region
        self._endpoint_url = endpoint_url
        if logger:
            self.set_logger(logger)

    def _client(self):
        return self.session.client(
            "dynamodb", region_name=self._region, endpoint_url=self._endpoint_url
        )

    async def get_latest(self, event_date: str) -> Optional[Checkpoint]:
        """Query the partition newest-first and return the first item."""
        try:
            async with self._client() as dynamodb:
                data = await dynamodb.query(
                    TableName=self.table_name,
                    KeyConditionExpression="EventDate = :event_date",
                    ExpressionAttributeValues={":event_date": {"S": event_date}},
                    ScanIndexForward=False,
                    Limit=1,
                )
        except (ClientError, BotoCoreError) as e:
            raise CheckpointLookupError(
                f"Failed to query checkpoints in {self.table_name} for {event_date}: {e}"
            ) from e

        items = data.get("Items", [])
        if not items:
            self.logger.info(f"No checkpoint found for given date: {event_date}")
            return None

        try:
            return Checkpoint.from_record(_from_item(items[0]))
        except ValueError as e:
            raise CheckpointLookupError(f"Error on unmarshaling checkpoint: {e}") from e

    async def put(self, checkpoint: Checkpoint) -> None:
        """Insert the checkpoint, refusing to overwrite an existing key."""
        record = checkpoint.to_record()
        try:
            async with self._client() as dynamodb:
                await dynamodb.put_item(
                    TableName=self.table_name,
                    Item=_to_item(record),
                    ConditionExpression="attribute_not_exists(CreatedAt)",
                )
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException":
                raise CheckpointConflictError(record["EventDate"], record["CreatedAt"]) from e
            raise CheckpointCommitError(f"Failed to insert checkpoint: {e}") from e
        except BotoCoreError as e:
            raise CheckpointCommitError(f"Failed to insert checkpoint: {e}") from e

        self.logger.debug(
            f"Stored checkpoint {record['EventDate']}/{record['CreatedAt']} "
            f"({record['From']}..{record['To']})"
        )


def _to_item(record: Dict[str, str]) -> Dict[str, Dict[str, str]]:
    return {key: {"S": value} for key, value in record.items()}


def _from_item(item: Dict[str, Dict[str, str]]) -> Dict[str, str]:
    return {key: value["S"] for key, value in item.items() if "S" in value}
