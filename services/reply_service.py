import logging
import time
from enum import Enum

from auth.quota import QuotaLedger
from domain.errors import QuotaExceeded, SupportReplyError
from domain.identity import Anonymous, CallerIdentity
from domain.schema import GenerationResponse
from prompt_management.build_prompt import build_system_prompt
from security.validation import validate_generate_request
from services.ai.output_postprocess import extract_drafts, pad_drafts

logger = logging.getLogger(__name__)


class Stage(str, Enum):
    RESOLVING = "resolving"
    VALIDATING = "validating"
    METERING = "metering"
    PROMPTING = "prompting"
    COMPLETING = "completing"
    ASSEMBLING = "assembling"
    DONE = "done"
    REJECTED = "rejected"
    FAILED = "failed"


class ReplyPipeline:
    """
    One instance per request.

    Resolving -> Validating -> Metering -> Prompting -> Completing -> Assembling -> Done
    Client-caused errors (bad input, quota) end in Rejected; provider and
    configuration errors end in Failed.

    Validation (and the provider-config check) run before metering so a
    malformed or unservable request never spends a quota unit. Once metered,
    the unit stays spent even if the provider call fails.
    """

    def __init__(self, ledger: QuotaLedger, client_factory, config):
        self.ledger = ledger
        self.client_factory = client_factory
        self.config = config
        self.stage = Stage.RESOLVING

    def _enter(self, stage: Stage) -> None:
        logger.debug("pipeline %s -> %s", self.stage.value, stage.value)
        self.stage = stage

    def run(self, identity: CallerIdentity, raw) -> GenerationResponse:
        start = time.perf_counter()
        try:
            client = self.client_factory(self.config)

            self._enter(Stage.VALIDATING)
            req = validate_generate_request(raw)

            self._enter(Stage.METERING)
            decision = self.ledger.check_and_increment(identity)
            if not decision.allowed:
                snapshot = self.ledger.snapshot(identity, used=decision.used)
                raise QuotaExceeded(
                    limit=snapshot.limit,
                    used=decision.used,
                    pro=snapshot.pro,
                    anonymous=isinstance(identity, Anonymous),
                )

            self._enter(Stage.PROMPTING)
            system_prompt = build_system_prompt(req.tone, req.language)
            logger.info(
                "generating tier=%s tone=%s language=%s message_len=%d",
                identity.tier, req.tone.value, req.language, len(req.message),
            )

            self._enter(Stage.COMPLETING)
            raw_text = client.complete(system_prompt, req.message)

            self._enter(Stage.ASSEMBLING)
            drafts = pad_drafts(extract_drafts(raw_text))
            response = GenerationResponse(
                drafts=drafts,
                quota=self.ledger.snapshot(identity, used=decision.used),
            )
        except SupportReplyError as e:
            failed_in = self.stage
            self._enter(Stage.REJECTED if e.policy.client_caused else Stage.FAILED)
            logger.warning(
                "generation %s in %s kind=%s duration_ms=%d",
                self.stage.value, failed_in.value, e.kind.value, _elapsed_ms(start),
            )
            raise

        self._enter(Stage.DONE)
        logger.info("generated %d drafts in %dms", len(response.drafts), _elapsed_ms(start))
        return response


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)
