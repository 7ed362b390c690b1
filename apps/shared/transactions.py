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


"""transactions - Transaction assembly

This module binds an instruction plan to a blockhash and signs it
"""
import functools
import logging

from solders.errors import SignerError
from solders.message import Message
from solders.transaction import Transaction

from modules.exceptions import AssemblyException

LOGGER = logging.getLogger(__name__)


def compose_builder(*functions):
    """Construct composition"""
    return functools.reduce(
        lambda f, g: lambda x: f(g(x)), functions, lambda x: x)


def required_signers(message):
    """Accounts the compiled message needs signatures from"""
    return message.account_keys[:message.header.num_required_signatures]


def __resolve_keypairs(plan, keypairs):
    """Pair every declared signer with its keypair, in declared order"""
    by_pubkey = {k.pubkey(): k for k in keypairs}
    missing = [str(s) for s in plan.signers if s not in by_pubkey]
    if missing:
        raise AssemblyException(
            "No keypair for signers {}".format(', '.join(missing)))
    return [by_pubkey[s] for s in plan.signers]


def assemble_transaction(plan, authority, asset, checkpoint):
    """Creates the fully signed transaction for a plan

    Args:
        plan (InstructionPlan): ordered instructions and declared signers
        authority (ServerAuthority): fee payer and authority signer
        asset (Keypair): the new mint keypair, co-signs its allocation
        checkpoint (Checkpoint): recent blockhash to bind against

    Returns:
        Transaction: signed by every declared signer

    Raises:
        AssemblyException: if the unit can not be fully signed
    """
    if plan.fee_payer != authority.pubkey:
        raise AssemblyException(
            "Plan fee payer {} is not the server authority {}".format(
                plan.fee_payer, authority.pubkey))
    message = Message.new_with_blockhash(
        plan.instructions, plan.fee_payer, checkpoint.blockhash)
    compiled = set(required_signers(message))
    if compiled != set(plan.signers):
        raise AssemblyException(
            "Declared signers {} do not match required signers {}".format(
                sorted(str(s) for s in plan.signers),
                sorted(str(s) for s in compiled)))
    keypairs = __resolve_keypairs(plan, [authority.keypair, asset])
    try:
        transaction = Transaction(keypairs, message, checkpoint.blockhash)
    except SignerError as e:
        raise AssemblyException("Unable to sign transaction: {}".format(e))
    LOGGER.debug(
        "Assembled %d instructions signed by %d keys",
        len(plan), len(keypairs))
    return transaction
