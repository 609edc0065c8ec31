"""Resource types for version v1 of the operators.coreos.com API group."""