"""Resource types for version v1alpha2 of the operators.coreos.com API group."""