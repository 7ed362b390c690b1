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


import logging
import sys

from flask import Flask, request
from flask_restx import Resource, Api

from modules.config import (
    load_solmint_config, load_server_authority, wallet_path,
    solana_rpc_url, commitment_level, rest_binding, log_verbosity)
from modules.exceptions import AuthException
from modules.logs import setup_loggers
from shared.ledger_client import Ledger
from shared.token import handle_create_token

LOGGER = logging.getLogger(__name__)

VERSION = '0.1.0'


def create_application(authority, ledger):
    """Flask application bound to one authority and ledger handle"""
    application = Flask(__name__)

    api = Api(
        application,
        version=VERSION,
        title='solmint-rest',
        description='Token creation on Solana')

    ns = api.namespace(
        'solmint', path='/', description='token operations')

    create_token_parser = ns.parser()
    create_token_parser.add_argument(
        'data', location='form', type=str, required=True,
        help='JSON encoded token creation request')

    @ns.route('/create_token')
    class CreateToken(Resource):
        @ns.expect(create_token_parser)
        def post(self):
            """Create, mint and describe a new token for a wallet"""
            fields = request.form.to_dict()
            fields.update(request.files.to_dict())
            return handle_create_token(fields, authority, ledger)

    @ns.route('/health')
    class Health(Resource):
        def get(self):
            """Liveness probe"""
            return {"status": "ok"}, 200

    return application


def main():
    load_solmint_config()
    setup_loggers(verbose_level=log_verbosity())
    try:
        authority = load_server_authority(wallet_path())
    except AuthException as e:
        LOGGER.critical("Unable to load server wallet: %s", e)
        sys.exit(1)
    LOGGER.info("Server authority %s", authority.pubkey)
    ledger = Ledger(solana_rpc_url(), commitment_level())
    host, port = rest_binding()
    create_application(authority, ledger).run(
        host=host, port=port, threaded=True)


if __name__ == '__main__':
    main()
