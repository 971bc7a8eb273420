"""
Ledger Gateway

The only component that talks to the Solana RPC node. It derives program
addresses, reads and decodes receipt accounts, checks transaction finality
and builds the campaign activation transaction.

Read failures are data, not errors: a missing account, a transport failure
and a truncated buffer all come back as None (or False for finality).
Callers cannot tell "ledger is down" from "fact does not exist" and must not
retry here; retrying is a client concern.
"""

from __future__ import annotations

import base64
import json
import logging
from typing import Any, Optional

from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Commitment
from solders.keypair import Keypair
from solders.message import Message
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.transaction import Transaction

from core.config.runtime import LedgerConfig
from core.ledger.accounts import ReceiptAccount, decode_receipt
from core.ledger.addresses import campaign_address, receipt_address, to_pubkey
from core.ledger.instructions import initialize_campaign_instruction
from core.schemas.errors import (
    LedgerConfigurationException,
    LedgerUnavailableException,
)


logger = logging.getLogger(__name__)


def load_keypair(secret: str) -> Keypair:
    """
    Parse a 64-byte secret key given as a JSON array of integers.

    Raises:
        LedgerConfigurationException: If the secret cannot be parsed
    """
    try:
        return Keypair.from_bytes(bytes(json.loads(secret)))
    except Exception as exc:  # noqa: BLE001
        raise LedgerConfigurationException(
            f"Fee recipient secret key is not a valid keypair: {exc}"
        ) from exc


class LedgerGateway:
    """
    Read access to receipts and transactions, plus activation tx building.

    The RPC client is the only state and is safe to share between
    concurrent requests.

    Usage:
        gateway = LedgerGateway(config.ledger)

        receipt = await gateway.get_receipt(campaign, buyer, nonce)
        if receipt is not None and not receipt.is_claimed:
            ...

        await gateway.close()
    """

    def __init__(
        self,
        config: LedgerConfig,
        *,
        client: Optional[Any] = None,
    ) -> None:
        """
        Initialize the gateway.

        Args:
            config: Immutable ledger configuration
            client: RPC client; defaults to an AsyncClient on config.rpc_url
        """
        self.config = config
        self.program_id = to_pubkey(config.program_id)
        self._commitment = Commitment(config.commitment)
        self._client = client if client is not None else AsyncClient(config.rpc_url)
        self._fee_recipient: Optional[Keypair] = None
        if config.fee_recipient_secret:
            self._fee_recipient = load_keypair(config.fee_recipient_secret)

    @property
    def fee_recipient(self) -> Optional[Pubkey]:
        if self._fee_recipient is None:
            return None
        return self._fee_recipient.pubkey()

    def campaign_address(self, seed: int) -> Pubkey:
        """Derive the campaign account address for ``seed``."""
        address, _ = campaign_address(self.program_id, seed)
        return address

    def receipt_address(self, campaign: Pubkey, buyer: Pubkey, nonce: int) -> Pubkey:
        address, _ = receipt_address(self.program_id, campaign, buyer, nonce)
        return address

    async def get_receipt(
        self,
        campaign: Pubkey,
        buyer: Pubkey,
        nonce: int,
    ) -> Optional[ReceiptAccount]:
        """
        Fetch and decode the receipt for ``(campaign, buyer, nonce)``.

        Returns:
            The decoded receipt, or None if the account does not exist,
            the fetch fails, or the data is too short to decode
        """
        address = self.receipt_address(campaign, buyer, nonce)

        try:
            resp = await self._client.get_account_info(address, commitment=self._commitment)
        except Exception as e:  # noqa: BLE001
            logger.warning(f"Receipt lookup failed for {address}: {e}")
            return None

        account = resp.value
        if account is None or account.data is None:
            logger.debug(f"No receipt account at {address}")
            return None

        receipt = decode_receipt(bytes(account.data))
        if receipt is None:
            logger.warning(
                f"Receipt account {address} too short to decode ({len(account.data)} bytes)"
            )
        return receipt

    async def verify_transaction(self, signature: str) -> bool:
        """
        Check that a transaction is final and succeeded.

        Valid iff the transaction is found at the configured commitment and
        its metadata reports no error. Any lookup failure is invalid.
        """
        try:
            tx_sig = Signature.from_string(signature)
            resp = await self._client.get_transaction(
                tx_sig,
                commitment=self._commitment,
                max_supported_transaction_version=0,
            )
        except Exception as e:  # noqa: BLE001
            logger.warning(f"Transaction lookup failed for {signature[:16]}...: {e}")
            return False

        tx = resp.value
        if tx is None:
            logger.info(f"Transaction {signature[:16]}... not found")
            return False

        meta = tx.transaction.meta
        if meta is None or meta.err is not None:
            logger.info(f"Transaction {signature[:16]}... failed or has no metadata")
            return False
        return True

    async def build_initialize_campaign_tx(
        self,
        authority: Pubkey,
        reward_mint: Pubkey,
        seed: int,
        merkle_root: bytes,
        pack_price: int,
        total_packs: int,
    ) -> str:
        """
        Build the activation transaction, partially signed by the fee recipient.

        The authority pays fees and adds the remaining signature in its wallet.

        Returns:
            Base64 wire encoding of the transaction

        Raises:
            LedgerConfigurationException: If no fee recipient key is configured
            LedgerUnavailableException: If the latest blockhash cannot be fetched
        """
        if self._fee_recipient is None:
            raise LedgerConfigurationException(
                "Fee recipient key is not configured; cannot build activation transaction"
            )

        ix = initialize_campaign_instruction(
            program_id=self.program_id,
            authority=authority,
            fee_recipient=self._fee_recipient.pubkey(),
            reward_mint=reward_mint,
            seed=seed,
            merkle_root=merkle_root,
            pack_price=pack_price,
            total_packs=total_packs,
        )

        try:
            resp = await self._client.get_latest_blockhash(commitment=self._commitment)
        except Exception as e:  # noqa: BLE001
            raise LedgerUnavailableException(f"Failed to fetch latest blockhash: {e}") from e
        blockhash = resp.value.blockhash

        message = Message.new_with_blockhash([ix], authority, blockhash)
        tx = Transaction.new_unsigned(message)
        tx.partial_sign([self._fee_recipient], blockhash)

        return base64.b64encode(bytes(tx)).decode("ascii")

    async def close(self) -> None:
        """Close the RPC client."""
        await self._client.close()


__all__ = [
    "LedgerGateway",
    "load_keypair",
]
