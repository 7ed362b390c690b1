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



class SolmintException(Exception):
    """Base of the token creation errors

    status is the HTTP status class reported back to the caller
    """
    status = 500


class DataException(SolmintException):
    """Caller supplied data that can not be used"""
    status = 400


class AuthException(SolmintException):
    """Server authority key material could not be loaded"""
    pass


class LedgerReadException(SolmintException):
    """Rent or blockhash could not be read from the ledger"""
    pass


class AssemblyException(SolmintException):
    """Transaction could not be fully signed"""
    pass


class SubmissionException(SolmintException):
    """Ledger rejected or never confirmed the transaction"""
    pass


class CliException(Exception):
    pass
