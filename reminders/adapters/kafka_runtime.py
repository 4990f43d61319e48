"""Kafka transport adapters for publishing and consuming due reminders.

Mental model refresher:
- This module is transport glue to Kafka itself.
- It maps Kafka records into the existing consumer-handler adapter flow.
- Business/channel logic still lives in domain/application layers.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import UTC, datetime
from typing import Any, Mapping

from ..application.dispatch import DispatchCoordinator
from ..domain.base import ChannelSender
from ..domain.email import EmailChannelSender
from ..domain.sms import SmsChannelSender
from ..types import SendEmailFn
from .config import (
    MailgunConfig,
    SmtpConfig,
    TwilioConfig,
    email_channel_config_from_env,
    env_bool,
    required_env,
    sms_channel_config_from_env,
)
from .consumer_handler import handle_message
from .real_senders import MailgunEmailTransport, SmtpEmailTransport, TwilioSmsTransport

logger = logging.getLogger(__name__)

DEFAULT_TOPIC = "reminders.due"


def publish_reminder_due_event(
    payload: Mapping[str, Any],
    *,
    topic: str | None = None,
) -> dict[str, Any]:
    """Publish one `reminders.due` event to Kafka."""
    _KafkaConsumer, KafkaProducer, _TopicPartition, _OffsetAndMetadata = _import_kafka_python()
    bootstrap_servers = _bootstrap_servers_from_env()
    topic_name = topic or os.getenv("KAFKA_TOPIC_REMINDERS_DUE", DEFAULT_TOPIC)
    send_timeout_seconds = float(os.getenv("KAFKA_SEND_TIMEOUT_SECONDS", "10"))

    producer = KafkaProducer(
        bootstrap_servers=bootstrap_servers,
        value_serializer=_serialize_json_object,
        acks=os.getenv("KAFKA_PRODUCER_ACKS", "all"),
    )
    try:
        future = producer.send(topic_name, value=dict(payload))
        metadata = future.get(timeout=send_timeout_seconds)
        producer.flush(timeout=send_timeout_seconds)
    finally:
        producer.close()

    return {
        "topic": metadata.topic,
        "partition": metadata.partition,
        "offset": metadata.offset,
    }


def build_coordinator_from_env() -> DispatchCoordinator:
    """Wire email (SMTP or Mailgun) and, unless disabled, Twilio SMS senders.

    `EMAIL_PROVIDER` picks `smtp` (default) or `mailgun`.
    `REMINDER_SMS_ENABLED=false` leaves SMS out of the sender list.
    """
    senders: list[ChannelSender] = [
        EmailChannelSender(_email_transport_from_env(), email_channel_config_from_env())
    ]
    if env_bool("REMINDER_SMS_ENABLED", default=True):
        senders.append(
            SmsChannelSender(
                TwilioSmsTransport(TwilioConfig.from_env()), sms_channel_config_from_env()
            )
        )
    return DispatchCoordinator(senders)


def run_reminder_worker_forever(coordinator: DispatchCoordinator | None = None) -> int:
    """Run the Kafka consumer loop that dispatches due reminders.

    Records whose schedule ends FAILED, or that cannot be decoded, go to the
    dead-letter topic; the offset is committed only once that publish succeeds.
    """
    KafkaConsumer, KafkaProducer, TopicPartition, OffsetAndMetadata = _import_kafka_python()
    coordinator = coordinator or build_coordinator_from_env()
    bootstrap_servers = _bootstrap_servers_from_env()
    topic_name = os.getenv("KAFKA_TOPIC_REMINDERS_DUE", DEFAULT_TOPIC)
    dlq_enabled = env_bool("KAFKA_DLQ_ENABLED", default=True)
    dlq_topic = os.getenv("KAFKA_TOPIC_REMINDERS_DUE_DLQ", f"{topic_name}.dlq")
    group_id = os.getenv("KAFKA_GROUP_ID", "reminders-dispatch-worker")
    auto_offset_reset = os.getenv("KAFKA_AUTO_OFFSET_RESET", "earliest")
    poll_timeout_ms = _poll_timeout_ms_from_env()
    max_records = int(os.getenv("KAFKA_MAX_RECORDS_PER_POLL", "50"))
    dlq_send_timeout_seconds = float(
        os.getenv(
            "KAFKA_DLQ_SEND_TIMEOUT_SECONDS",
            os.getenv("KAFKA_SEND_TIMEOUT_SECONDS", "10"),
        )
    )

    consumer = KafkaConsumer(
        topic_name,
        bootstrap_servers=bootstrap_servers,
        group_id=group_id,
        enable_auto_commit=False,
        auto_offset_reset=auto_offset_reset,
    )
    dlq_producer = (
        KafkaProducer(
            bootstrap_servers=bootstrap_servers,
            value_serializer=_serialize_json_object,
            acks=os.getenv("KAFKA_PRODUCER_ACKS", "all"),
        )
        if dlq_enabled
        else None
    )
    logger.info(
        "[WORKER START] topic=%s group_id=%s channels=%s dlq_enabled=%s dlq_topic=%s",
        topic_name,
        group_id,
        ",".join(sender.channel for sender in coordinator.senders),
        dlq_enabled,
        dlq_topic,
    )

    try:
        while True:
            batches = consumer.poll(timeout_ms=poll_timeout_ms, max_records=max_records)
            if not batches:
                continue

            for _topic_partition, records in batches.items():
                for message in records:
                    message_topic = message.topic
                    message_partition = int(message.partition)
                    message_offset = int(message.offset)

                    def commit_current_offset() -> None:
                        offsets = {
                            TopicPartition(message_topic, message_partition): _offset_and_metadata(
                                OffsetAndMetadata, message_offset + 1
                            )
                        }
                        consumer.commit(offsets=offsets)
                        logger.info(
                            "[COMMIT] topic=%s partition=%s offset=%s",
                            message_topic,
                            message_partition,
                            message_offset,
                        )

                    def publish_to_dlq(*, reason: str, source_payload: Any) -> bool:
                        if dlq_producer is None:
                            return False

                        dlq_payload = _build_dlq_payload(
                            source_topic=message_topic,
                            source_partition=message_partition,
                            source_offset=message_offset,
                            source_payload=source_payload,
                            failure_reason=reason,
                        )
                        try:
                            future = dlq_producer.send(dlq_topic, value=dlq_payload)
                            metadata = future.get(timeout=dlq_send_timeout_seconds)
                        except Exception as exc:
                            logger.error(
                                "[DLQ ERROR] source_topic=%s source_partition=%s "
                                "source_offset=%s reason=%s error=%s",
                                message_topic,
                                message_partition,
                                message_offset,
                                reason,
                                exc,
                            )
                            return False

                        logger.warning(
                            "[DLQ] source_topic=%s source_partition=%s source_offset=%s "
                            "dlq_topic=%s dlq_partition=%s dlq_offset=%s reason=%s",
                            message_topic,
                            message_partition,
                            message_offset,
                            metadata.topic,
                            metadata.partition,
                            metadata.offset,
                            reason,
                        )
                        return True

                    def reject_or_hold(reason: str, source_payload: Any) -> None:
                        if publish_to_dlq(reason=reason, source_payload=source_payload):
                            commit_current_offset()
                        else:
                            logger.warning(
                                "[NO-COMMIT] topic=%s partition=%s offset=%s reason=%s",
                                message_topic,
                                message_partition,
                                message_offset,
                                reason,
                            )

                    try:
                        payload = _deserialize_json_object(message.value)
                    except Exception as exc:
                        reject_or_hold(f"decode_failed: {exc}", message.value)
                        continue

                    internal_record = {
                        "topic": message_topic,
                        "partition": message_partition,
                        "offset": message_offset,
                        "value": payload,
                    }

                    result = handle_message(
                        internal_record,
                        coordinator=coordinator,
                        commit=lambda _record: commit_current_offset(),
                        reject=lambda _record, reason: reject_or_hold(
                            reason, _record.get("value")
                        ),
                    )
                    logger.info(
                        "[RESULT] topic=%s partition=%s offset=%s status=%s "
                        "schedule_status=%s should_commit=%s error=%s",
                        message_topic,
                        message_partition,
                        message_offset,
                        result["status"],
                        result["schedule_status"],
                        result["should_commit"],
                        result["error"],
                    )
    except KeyboardInterrupt:
        logger.info("[WORKER STOP] received keyboard interrupt")
        return 0
    except Exception:
        logger.exception("[WORKER ERROR]")
        return 1
    finally:
        _close_quietly(consumer.close)
        if dlq_producer is not None:
            _close_quietly(lambda: dlq_producer.flush(timeout=dlq_send_timeout_seconds))
            _close_quietly(dlq_producer.close)


def _email_transport_from_env() -> SendEmailFn:
    provider = os.getenv("EMAIL_PROVIDER", "smtp").strip().lower()
    if provider == "smtp":
        return SmtpEmailTransport(SmtpConfig.from_env())
    if provider == "mailgun":
        return MailgunEmailTransport(MailgunConfig.from_env())
    raise RuntimeError(f"Unsupported EMAIL_PROVIDER: {provider!r} (expected smtp or mailgun)")


def _import_kafka_python() -> tuple[Any, Any, Any, Any]:
    try:
        from kafka import KafkaConsumer, KafkaProducer, TopicPartition
        from kafka.structs import OffsetAndMetadata
    except Exception as exc:
        raise RuntimeError(
            "Kafka support requires `kafka-python`. Install with: pip install kafka-python"
        ) from exc
    return KafkaConsumer, KafkaProducer, TopicPartition, OffsetAndMetadata


def _bootstrap_servers_from_env() -> list[str]:
    raw = required_env("KAFKA_BOOTSTRAP_SERVERS")
    servers = [item.strip() for item in raw.split(",") if item.strip()]
    if not servers:
        raise RuntimeError("KAFKA_BOOTSTRAP_SERVERS must include at least one host:port")
    return servers


def _poll_timeout_ms_from_env() -> int:
    timeout_seconds = float(os.getenv("KAFKA_POLL_TIMEOUT_SECONDS", "1.0"))
    timeout_ms = int(timeout_seconds * 1000)
    if timeout_ms <= 0:
        raise RuntimeError("KAFKA_POLL_TIMEOUT_SECONDS must be > 0")
    return timeout_ms


def _serialize_json_object(payload: Mapping[str, Any]) -> bytes:
    return json.dumps(payload, separators=(",", ":")).encode("utf-8")


def _deserialize_json_object(raw: bytes | str | Mapping[str, Any]) -> dict[str, Any]:
    if isinstance(raw, Mapping):
        return dict(raw)

    if isinstance(raw, bytes):
        text = raw.decode("utf-8")
    elif isinstance(raw, str):
        text = raw
    else:
        raise ValueError(f"Unsupported Kafka payload type: {type(raw).__name__}")

    parsed = json.loads(text)
    if not isinstance(parsed, dict):
        raise ValueError("Kafka payload must decode to a JSON object")
    return parsed


def _build_dlq_payload(
    *,
    source_topic: str,
    source_partition: int,
    source_offset: int,
    source_payload: Any,
    failure_reason: str,
) -> dict[str, Any]:
    payload = {
        "event_type": f"{source_topic}.dlq",
        "failed_at": datetime.now(tz=UTC).isoformat(),
        "failure_reason": failure_reason,
        "source": {
            "topic": source_topic,
            "partition": source_partition,
            "offset": source_offset,
        },
        "payload": _to_json_compatible(source_payload),
    }

    if isinstance(source_payload, Mapping):
        event_id = source_payload.get("event_id")
        if isinstance(event_id, str) and event_id.strip():
            payload["source_event_id"] = event_id.strip()
        schedule = source_payload.get("schedule")
        if isinstance(schedule, Mapping) and schedule.get("schedule_id") is not None:
            payload["source_schedule_id"] = schedule.get("schedule_id")

    return payload


def _to_json_compatible(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, Mapping):
        return {str(key): _to_json_compatible(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_to_json_compatible(item) for item in value]
    return repr(value)


def _close_quietly(close: Any) -> None:
    try:
        close()
    except Exception:
        logger.debug("error while closing Kafka client", exc_info=True)


def _offset_and_metadata(offset_and_metadata_type: Any, offset: int) -> Any:
    """Build kafka-python OffsetAndMetadata across version signatures."""
    try:
        return offset_and_metadata_type(offset, "", -1)
    except TypeError:
        try:
            return offset_and_metadata_type(offset, "", None)
        except TypeError:
            return offset_and_metadata_type(offset, "")
