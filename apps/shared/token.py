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


"""token - token creation pipeline

Validate, plan, assemble and submit one token creation. Either the
whole unit lands on the ledger or nothing does.
"""

import logging

from solders.keypair import Keypair
from spl.token.constants import MINT_LEN

from modules.address import Address
from modules.exceptions import AssemblyException, SolmintException
from modules.request import token_request_from_multipart
from shared.plan import build_plan
from shared.transactions import assemble_transaction, compose_builder

LOGGER = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Token created successfully!"


class CreatedToken(object):
    """Outcome of a confirmed token creation"""

    def __init__(self, token_address, transaction_id, plan):
        self._token_address = token_address
        self._transaction_id = transaction_id
        self._plan = plan

    @property
    def token_address(self):
        return self._token_address

    @property
    def transaction_id(self):
        return self._transaction_id

    @property
    def plan(self):
        return self._plan


def __derive(ingest):
    """Fresh asset identity and the addresses that hang off it"""
    token_request, authority, ledger = ingest
    asset = Keypair()
    mint = asset.pubkey()
    return (
        token_request, authority, ledger, asset,
        Address.holding_address(token_request.owner, mint),
        Address.metadata_address(mint))


def __plan(ingest):
    token_request, authority, ledger, asset, holding, metadata = ingest
    rent = ledger.minimum_balance_for_rent_exemption(MINT_LEN)
    plan = build_plan(
        token_request, authority.pubkey, asset.pubkey(),
        holding, metadata, rent)
    return (authority, ledger, asset, plan)


def __assemble(ingest):
    authority, ledger, asset, plan = ingest
    checkpoint = ledger.latest_checkpoint()
    transaction = assemble_transaction(plan, authority, asset, checkpoint)
    return (ledger, asset, plan, transaction, checkpoint)


def __submit(ingest):
    ledger, asset, plan, transaction, checkpoint = ingest
    signature = ledger.submit_and_confirm(
        transaction, checkpoint.last_valid_block_height)
    return CreatedToken(str(asset.pubkey()), signature, plan)


def create_token_from_request(token_request, authority, ledger):
    """Run a validated request through to confirmation

    Args:
        token_request (TokenRequest): validated request
        authority (ServerAuthority): fee payer and initial authorities
        ledger (Ledger): rpc handle for reads and submission

    Returns:
        CreatedToken: mint address, transaction id and the plan used
    """
    LOGGER.info(
        "Creating %s for %s: %s",
        token_request.token_symbol, token_request.wallet_address,
        token_request.description)
    created = compose_builder(
        __submit, __assemble, __plan, __derive)(
            (token_request, authority, ledger))
    LOGGER.info(
        "Token %s created in %s",
        created.token_address, created.transaction_id)
    return created


def create_token(fields, authority, ledger):
    """Validate the multipart fields then create the token"""
    return create_token_from_request(
        token_request_from_multipart(fields), authority, ledger)


def success_response(token_address, transaction_id):
    return {
        "success": True,
        "message": SUCCESS_MESSAGE,
        "token_address": token_address,
        "transaction_id": transaction_id}


def failure_response(message):
    return {"success": False, "message": message}


def handle_create_token(fields, authority, ledger):
    """Create a token, returning a response body and status code"""
    try:
        created = create_token(fields, authority, ledger)
    except AssemblyException as e:
        LOGGER.exception("Transaction assembly failed")
        return failure_response(str(e)), e.status
    except SolmintException as e:
        LOGGER.warning("Token creation failed: %s", e)
        return failure_response(str(e)), e.status
    except Exception as e:
        LOGGER.exception("Unexpected token creation failure")
        return failure_response("Internal error: {}".format(e)), 500
    return success_response(
        created.token_address, created.transaction_id), 200
