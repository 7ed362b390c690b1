# ------------------------------------------------------------------------------
# Copyright 2018 Frank V. Castellucci and Arthur Greef
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# ------------------------------------------------------------------------------


"""ledger-client - solana rpc wrapper

Rent, blockhash and transaction submission against the configured rpc
endpoint. Each call is a blocking round trip for the caller.
"""

import asyncio
import logging

from solana.exceptions import SolanaRpcException
from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Commitment
from solana.rpc.core import (
    RPCException, RPCNoResultException, UnconfirmedTxError,
    TransactionExpiredBlockheightExceededError)
from solana.rpc.models import TxOpts

from modules.exceptions import LedgerReadException, SubmissionException

LOGGER = logging.getLogger(__name__)

READ_ERRORS = (SolanaRpcException, RPCException, RPCNoResultException)
SUBMIT_ERRORS = READ_ERRORS + (
    UnconfirmedTxError, TransactionExpiredBlockheightExceededError)


class Checkpoint(object):
    """Recent blockhash and the last block height it is valid for"""

    def __init__(self, blockhash, last_valid_block_height=None):
        self._blockhash = blockhash
        self._last_valid_block_height = last_valid_block_height

    @property
    def blockhash(self):
        return self._blockhash

    @property
    def last_valid_block_height(self):
        return self._last_valid_block_height


class Ledger(object):
    """Read only handle shared by every request

    Every call runs on its own event loop with its own rpc session
    """

    def __init__(self, url, commitment='confirmed'):
        self._url = url
        self._commitment = Commitment(commitment)

    @property
    def url(self):
        return self._url

    @property
    def commitment(self):
        return self._commitment

    def _client(self):
        return AsyncClient(self._url, commitment=self._commitment)

    async def _rent_exemption(self, size):
        async with self._client() as client:
            response = await client.get_minimum_balance_for_rent_exemption(
                size)
        return response.value

    async def _latest_blockhash(self):
        async with self._client() as client:
            response = await client.get_latest_blockhash(self._commitment)
        return Checkpoint(
            response.value.blockhash,
            response.value.last_valid_block_height)

    async def _submit(self, transaction, last_valid_block_height):
        async with self._client() as client:
            response = await client.send_raw_transaction(
                bytes(transaction),
                opts=TxOpts(
                    skip_confirmation=True,
                    preflight_commitment=self._commitment))
            signature = response.value
            LOGGER.info("Transaction %s sent to %s", signature, self._url)
            statuses = await client.confirm_transaction(
                signature,
                self._commitment,
                last_valid_block_height=last_valid_block_height)
        status = statuses.value[0]
        if status is not None and status.err is not None:
            LOGGER.warning(
                "Transaction %s rejected: %s", signature, status.err)
            raise SubmissionException(
                "Transaction {} failed: {}".format(signature, status.err))
        return str(signature)

    def minimum_balance_for_rent_exemption(self, size):
        """Lamports keeping an account of size bytes rent exempt"""
        try:
            return asyncio.run(self._rent_exemption(size))
        except READ_ERRORS as e:
            LOGGER.warning("Rent exemption read failed: %s", e)
            raise LedgerReadException(
                "Failed to get rent exemption: {}".format(e))

    def latest_checkpoint(self):
        """Latest blockhash to bind a transaction against"""
        try:
            return asyncio.run(self._latest_blockhash())
        except READ_ERRORS as e:
            LOGGER.warning("Blockhash read failed: %s", e)
            raise LedgerReadException(
                "Failed to get recent blockhash: {}".format(e))

    def submit_and_confirm(self, transaction, last_valid_block_height=None):
        """Submit a signed transaction, block until confirmed or rejected

        Returns:
            str: the transaction signature

        Raises:
            SubmissionException: rejected, expired or never confirmed
        """
        try:
            return asyncio.run(
                self._submit(transaction, last_valid_block_height))
        except SUBMIT_ERRORS as e:
            LOGGER.warning("Transaction failed: %s", e)
            raise SubmissionException(
                "Failed to send transaction: {}".format(e))
