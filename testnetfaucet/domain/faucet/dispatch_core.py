"""
Balance gated transfers from the single faucet account.

Balance checks run concurrently, everything that touches the faucet account
nonce (reserve, build, sign, submit) runs under one lock, in admission order.
The local nonce counter only moves past a nonce once the node has accepted a
transaction using it. Whenever the core can't tell whether the node saw a
nonce, the counter is dropped and resynchronised from the chain on the next
job instead of being guessed.

When the node reports a pending count below the counter and no longer knows
the transaction this process sent with that nonce (mempool eviction, node
restart), the counter falls back to the pending count.

Admitted jobs run in their own task, so a caller going away (HTTP client
disconnect) doesn't abort a submission halfway through.
"""

import asyncio
from typing import Dict
from typing import Optional
from typing import Set

from testnetfaucet import api_logger
from testnetfaucet.domain.faucet import address as address_utils
from testnetfaucet.domain.faucet import transaction_builder
from testnetfaucet.domain.faucet.entities import DispatchJob
from testnetfaucet.domain.faucet.entities import DispatchOutcome
from testnetfaucet.domain.faucet.entities import DispatchStatus
from testnetfaucet.domain.faucet.entities import FailureReason
from testnetfaucet.domain.faucet.entities import FaucetConfig
from testnetfaucet.domain.faucet.entities import RejectionReason
from testnetfaucet.domain.faucet.entities import SignedTransaction
from testnetfaucet.domain.metrics import dispatch_metrics
from testnetfaucet.repository.chain_gateway_repository import ChainGatewayRepository
from testnetfaucet.repository.chain_gateway_repository import GatewayTimeoutError
from testnetfaucet.repository.chain_gateway_repository import (
    GatewayUnavailableError,
)
from testnetfaucet.repository.chain_gateway_repository import (
    SubmissionRejectedError,
)
from testnetfaucet.repository.signer_repository import SignerRepository
from testnetfaucet.repository.signer_repository import SigningError

logger = api_logger.get()


class DispatchCore:

    def __init__(
        self,
        config: FaucetConfig,
        gateway: ChainGatewayRepository,
        signer: SignerRepository,
    ):
        self._config = config
        self._gateway = gateway
        self._signer = signer
        self._lock = asyncio.Lock()
        # None until synchronised from the chain
        self._next_nonce: Optional[int] = None
        self._chain_id: Optional[int] = config.chain_id
        # nonce -> hash of transactions the node accepted from this process
        self._accepted_hashes: Dict[int, str] = {}
        self._in_flight: Set[asyncio.Task] = set()

    @property
    def faucet_address(self) -> str:
        return self._signer.address

    @property
    def next_nonce(self) -> Optional[int]:
        return self._next_nonce

    @property
    def in_flight_count(self) -> int:
        return len(self._in_flight)

    async def dispatch(self, recipient: str) -> DispatchOutcome:
        address = address_utils.to_checksum_address(recipient)
        if address is None:
            return self._finish(
                DispatchOutcome.failed(
                    FailureReason.INVALID_ADDRESS, f"Invalid address: {recipient}"
                )
            )

        ineligible = await self._check_eligibility(address)
        if ineligible:
            return self._finish(ineligible)

        job = DispatchJob(recipient=address, amount=self._config.amount_per_request)
        task = asyncio.create_task(self._run_job(job))
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)
        # the job keeps running when the caller is cancelled
        return await asyncio.shield(task)

    async def aclose(self) -> None:
        """Waits for admitted jobs to reach a terminal outcome"""
        if self._in_flight:
            logger.info(f"Waiting for {len(self._in_flight)} in-flight faucet jobs")
            await asyncio.gather(*self._in_flight, return_exceptions=True)

    async def _check_eligibility(self, address: str) -> Optional[DispatchOutcome]:
        try:
            recipient_balance = await self._gateway.get_balance(address)
            if recipient_balance != 0:
                return DispatchOutcome.rejected(
                    RejectionReason.NON_ZERO_BALANCE,
                    "Receiver already has a balance greater than 0",
                )
            faucet_balance = await self._gateway.get_balance(self._signer.address)
        except GatewayUnavailableError as e:
            return DispatchOutcome.failed(_gateway_failure_reason(e), e.message)
        if faucet_balance < self._config.max_transaction_cost:
            return DispatchOutcome.failed(
                FailureReason.INSUFFICIENT_FAUCET_FUNDS,
                "Faucet balance is too low to cover the transfer",
            )
        return None

    async def _run_job(self, job: DispatchJob) -> DispatchOutcome:
        dispatch_metrics.in_flight_jobs_gauge.inc()
        try:
            async with self._lock:
                outcome = await self._submit_job(job)
        except Exception as e:
            logger.error(
                f"Unexpected error while dispatching job_id={job.id} nonce={job.nonce}",
                exc_info=True,
            )
            self._next_nonce = None
            outcome = DispatchOutcome.failed(FailureReason.INTERNAL_ERROR, str(e))
        finally:
            dispatch_metrics.in_flight_jobs_gauge.dec()
        outcome.job_id = job.id
        return self._finish(outcome, job)

    async def _submit_job(self, job: DispatchJob) -> DispatchOutcome:
        """Must be called with the lock held"""
        attempts = self._config.nonce_too_low_retries + 1
        for attempt in range(attempts):
            try:
                chain_id = await self._get_chain_id()
                nonce = await self._reserve_nonce()
            except GatewayUnavailableError as e:
                return DispatchOutcome.failed(_gateway_failure_reason(e), e.message)
            job.nonce = nonce

            try:
                transaction = transaction_builder.build_transaction(
                    job.recipient,
                    job.amount,
                    nonce,
                    self._config.gas_price,
                    self._config.gas_limit,
                    chain_id,
                )
            except ValueError as e:
                return DispatchOutcome.failed(FailureReason.BUILD_FAILURE, str(e))

            try:
                signed = self._signer.sign(transaction)
            except SigningError as e:
                return DispatchOutcome.failed(FailureReason.SIGNING_FAILURE, str(e))

            try:
                tx_hash = await self._gateway.send_raw_transaction(
                    signed.raw_transaction
                )
            except SubmissionRejectedError as e:
                if e.is_already_known:
                    self._mark_accepted(nonce, signed.transaction_hash)
                    return DispatchOutcome.accepted(signed.transaction_hash)
                if e.is_nonce_too_low:
                    logger.warning(
                        f"Nonce {nonce} already used on chain, resyncing. "
                        f"job_id={job.id} attempt={attempt + 1}/{attempts}"
                    )
                    self._next_nonce = None
                    continue
                return DispatchOutcome.failed(
                    FailureReason.SUBMISSION_REJECTED, e.reason
                )
            except GatewayUnavailableError as e:
                return await self._reconcile(nonce, signed, e)

            self._mark_accepted(nonce, tx_hash)
            return DispatchOutcome.accepted(tx_hash)

        return DispatchOutcome.failed(
            FailureReason.SUBMISSION_REJECTED,
            f"Nonce too low after {attempts} attempts",
        )

    async def _get_chain_id(self) -> int:
        if self._chain_id is None:
            self._chain_id = await self._gateway.get_chain_id()
        return self._chain_id

    async def _reserve_nonce(self) -> int:
        chain_nonce = await self._gateway.get_next_nonce(self._signer.address)
        for nonce in [n for n in self._accepted_hashes if n < chain_nonce]:
            del self._accepted_hashes[nonce]
        if self._next_nonce is None:
            logger.info(f"Faucet nonce synchronised from chain, nonce={chain_nonce}")
            self._resync(chain_nonce)
        elif chain_nonce > self._next_nonce:
            logger.info(
                f"Chain is ahead of the local nonce, local={self._next_nonce} "
                f"chain={chain_nonce}"
            )
            self._resync(chain_nonce)
        elif chain_nonce < self._next_nonce:
            if await self._is_nonce_still_pending(chain_nonce):
                # node hasn't caught up with our own submissions yet
                logger.debug(
                    f"Chain is behind the local nonce, local={self._next_nonce} "
                    f"chain={chain_nonce}"
                )
            else:
                logger.warning(
                    f"Transaction with nonce {chain_nonce} dropped by the node, "
                    f"resyncing local={self._next_nonce} chain={chain_nonce}"
                )
                self._resync(chain_nonce)
        return self._next_nonce

    async def _is_nonce_still_pending(self, nonce: int) -> bool:
        """Whether the node still holds the transaction this process sent with `nonce`"""
        tx_hash = self._accepted_hashes.get(nonce)
        if tx_hash is None:
            return False
        return bool(await self._gateway.get_transaction(tx_hash))

    def _resync(self, chain_nonce: int) -> None:
        self._next_nonce = chain_nonce
        for nonce in [n for n in self._accepted_hashes if n >= chain_nonce]:
            del self._accepted_hashes[nonce]

    def _mark_accepted(self, nonce: int, tx_hash: str) -> None:
        self._accepted_hashes[nonce] = tx_hash
        self._next_nonce = nonce + 1

    async def _reconcile(
        self,
        nonce: int,
        signed: SignedTransaction,
        error: GatewayUnavailableError,
    ) -> DispatchOutcome:
        """
        Submission failed without an answer from the node. Asks the node whether
        it has the transaction or has seen the nonce used.
        """
        reason = _gateway_failure_reason(error)
        try:
            if await self._gateway.get_transaction(signed.transaction_hash):
                logger.info(
                    f"Transaction found after failed submit, tx_hash={signed.transaction_hash}"
                )
                self._mark_accepted(nonce, signed.transaction_hash)
                return DispatchOutcome.accepted(signed.transaction_hash)
            chain_nonce = await self._gateway.get_next_nonce(self._signer.address)
        except GatewayUnavailableError:
            logger.warning(
                f"Could not confirm whether nonce {nonce} was used, resyncing on next job"
            )
            self._next_nonce = None
            return DispatchOutcome.failed(reason, error.message)

        if chain_nonce > nonce:
            logger.warning(
                f"Nonce {nonce} consumed on chain by an unknown transaction, "
                f"chain={chain_nonce}, resyncing on next job"
            )
            self._next_nonce = None
        return DispatchOutcome.failed(reason, error.message)

    def _finish(
        self, outcome: DispatchOutcome, job: Optional[DispatchJob] = None
    ) -> DispatchOutcome:
        dispatch_metrics.record_outcome(outcome)
        details = (
            f"status={outcome.status.value} "
            f"reason={outcome.reason.value if outcome.reason else None} "
            f"tx_hash={outcome.transaction_hash} "
        )
        if job:
            details += (
                f"job_id={job.id} recipient={job.recipient} nonce={job.nonce} "
                f"amount={job.amount}"
            )
        if outcome.status == DispatchStatus.FAILED:
            logger.warning(f"Faucet dispatch failed {details} message={outcome.message}")
        else:
            logger.info(f"Faucet dispatch finished {details}")
        return outcome


def _gateway_failure_reason(error: GatewayUnavailableError) -> FailureReason:
    if isinstance(error, GatewayTimeoutError):
        return FailureReason.TIMEOUT
    return FailureReason.GATEWAY_UNAVAILABLE
